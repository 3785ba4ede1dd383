from __future__ import annotations

import copy
import json
from typing import Any, Dict, List, Optional

import pytest

from autolocale.config import GUARD_MARKER_KEY
from autolocale.core.store import GuardToken, LocalizationSettings, RecordStore


class InMemoryRecordStore(RecordStore):
    """Record store keeping all-locale records in a dict."""

    def __init__(self, locales: Optional[List[str]] = None, default_locale: str = "en") -> None:
        self._settings = LocalizationSettings(locales=locales, default_locale=default_locale) if locales else None
        self.records: Dict[str, Dict[Any, Dict[str, Any]]] = {}
        self.fetches: List[tuple] = []
        self.writes: List[dict] = []
        self.reject_locales: set = set()
        # Async callable(collection, record, request_metadata), fired after every write
        self.on_change = None

    @property
    def localization(self) -> Optional[LocalizationSettings]:
        return self._settings

    def put(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        self.records.setdefault(collection, {})[record["id"]] = copy.deepcopy(record)
        return record

    def get(self, collection: str, record_id: Any) -> Dict[str, Any]:
        return copy.deepcopy(self.records[collection][record_id])

    async def fetch_record_all_locales(self, collection: str, record_id: Any) -> Dict[str, Any]:
        self.fetches.append((collection, record_id))
        return self.get(collection, record_id)

    def _is_locale_mapping(self, node: Any) -> bool:
        return isinstance(node, dict) and bool(node) and set(node) <= set(self._settings.locales)

    def _merge(self, node: Dict[str, Any], patch: Dict[str, Any], locale: str) -> None:
        for key, value in patch.items():
            target = node.get(key)
            if self._is_locale_mapping(target):
                target[locale] = value
            elif isinstance(target, list) and isinstance(value, list):
                for current, update in zip(target, value):
                    if isinstance(current, dict) and isinstance(update, dict):
                        self._merge(current, update, locale)
            elif isinstance(target, dict) and isinstance(value, dict):
                self._merge(target, value, locale)
            elif key in node and target == value:
                # shared value such as a block id
                continue
            else:
                node[key] = {locale: value}

    async def update_record_locale(
        self,
        collection: str,
        record_id: Any,
        locale: str,
        patch: Dict[str, Any],
        *,
        skip_access_control: bool = True,
        request_marker: Optional[GuardToken] = None,
    ) -> Dict[str, Any]:
        if locale in self.reject_locales:
            raise PermissionError(f"locale {locale} is read-only")
        self.writes.append({
            "collection": collection,
            "id": record_id,
            "locale": locale,
            "patch": copy.deepcopy(patch),
            "skip_access_control": skip_access_control,
            "marker": request_marker,
        })
        self._merge(self.records[collection][record_id], patch, locale)
        if self.on_change is not None:
            await self.on_change(collection, self.get(collection, record_id), {GUARD_MARKER_KEY: request_marker})
        return self.get(collection, record_id)


class ScriptedClient:
    """LLM client answering per target locale from a script."""

    def __init__(self, script: Optional[Dict[str, Any]] = None, default: Any = None) -> None:
        self.script = script or {}
        self.default = default
        self.calls: List[dict] = []

    async def complete(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        request = json.loads(user_prompt)
        self.calls.append({"system": system_prompt, "user": request})
        answer = self.script.get(request["to"], self.default)
        if isinstance(answer, Exception):
            raise answer
        if callable(answer):
            return answer(request)
        if answer is None:
            return {key: f"[{request['to']}] {text}" for key, text in request["source"].items()}
        return answer


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore(locales=["en", "de", "fr"], default_locale="en")


@pytest.fixture
def client() -> ScriptedClient:
    return ScriptedClient()


@pytest.fixture
def article_schema() -> List[dict]:
    return [
        {"name": "title", "type": "text", "localized": True},
        {"name": "slug", "type": "text", "localized": False},
        {"name": "summary", "type": "textarea", "localized": True},
        {"name": "publishDate", "type": "date", "localized": False},
    ]


@pytest.fixture
def slate_body() -> List[dict]:
    return [
        {
            "type": "paragraph",
            "children": [
                {"text": "Hello "},
                {"text": "world", "bold": True},
            ],
        },
    ]


@pytest.fixture
def lexical_body() -> Dict[str, Any]:
    return {
        "root": {
            "type": "root",
            "format": "",
            "children": [
                {
                    "type": "paragraph",
                    "children": [
                        {"type": "text", "text": "Hello", "format": 0},
                        {"type": "linebreak"},
                        {"type": "text", "text": "world", "format": 1},
                    ],
                },
            ],
        },
    }


@pytest.fixture
def make_store():
    return InMemoryRecordStore


@pytest.fixture
def make_client():
    return ScriptedClient
