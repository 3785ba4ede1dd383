"""
Localization Manager Module

Main LocalizationManager class that reconciles one record after a change:
- Discover translatable fields
- Resolve the source locale
- Identify missing fields per target locale
- Translate using AI, one target locale at a time
- Write each locale back with a guard token
"""

from typing import Any, Dict, List, Optional

from autolocale.ai.exceptions import LLMRequestFailed, LocalizationError, WriteBackFailed
from autolocale.ai.service import LLMClient
from autolocale.config import ClientOptions, LocalizeOptions, validate_ai_config
from autolocale.core.locales import resolve_source
from autolocale.core.paths import TranslationPatch, build_patch_from_pairs, expand_fields, localized_value
from autolocale.core.richtext import detect_document, reinject, to_plain_text
from autolocale.core.schema import FieldDescriptor, resolve_fields
from autolocale.core.store import ChangeEvent, GuardToken, LocalizationSettings, RecordStore, is_guarded
from autolocale.core import validation
from autolocale.logger import get_logger
from autolocale.translation.prompts import build_prompt
from autolocale.translation.result import ReconcileResult, SkipReason, TranslationRequest
from autolocale.translation.validator import sanitize_model_output

logger = get_logger(__name__)


class LocalizationManager:
    """
    Fills missing locales of a record from its most complete locale.

    Registered once per collection; the instance is the post-change hook.
    It keeps no state between events.
    """

    def __init__(self, client: LLMClient, store: RecordStore, options: Optional[LocalizeOptions] = None):
        """
        Args:
            client: JSON-completion client (anything with an async complete())
            store: Record store of the host framework
            options: Registration options; defaults auto-detect everything
        """
        self.client = client
        self.store = store
        self.options = options or LocalizeOptions()

    async def __call__(self, event: ChangeEvent) -> Dict[str, Any]:
        """Host hook entry point. Always returns the document unchanged."""
        try:
            await self.reconcile(event)
        except Exception:
            logger.exception(f"[autolocale] {event.collection}#{event.record_id} - reconciliation aborted")
        return event.document

    def _resolve_target_locales(self, settings: LocalizationSettings, source_locale: str) -> List[str]:
        """Configured targets, or every configured locale, minus the source."""
        requested = self.options.target_locales or settings.locales
        targets: List[str] = []
        for code in requested:
            if not isinstance(code, str) or not code.strip():
                continue
            code = code.strip()
            if code == source_locale or code in targets:
                continue
            targets.append(code)
        return targets

    def _gate_closed(self, document: Dict[str, Any]) -> bool:
        gate = self.options.guard_flag_field
        return bool(gate) and isinstance(document, dict) and document.get(gate) is False

    async def reconcile(self, event: ChangeEvent) -> ReconcileResult:
        """
        Run one reconciliation pass for a change event.

        Per-locale failures are recorded on the result and never raised.

        Returns:
            ReconcileResult describing what was skipped, written or failed
        """
        collection = event.collection
        result = ReconcileResult(collection=collection, record_id=event.record_id)

        # Our own write-back coming around again
        if is_guarded(event.request_metadata) or is_guarded(event.context):
            result.skipped = SkipReason.GUARDED
            return result

        settings = self.store.localization
        if not settings or not settings.locales:
            logger.debug(f"[autolocale] {collection} - localization disabled, nothing to do")
            result.skipped = SkipReason.LOCALIZATION_DISABLED
            return result

        fields = resolve_fields(event.schema, self.options.fields)
        if not fields:
            logger.debug(f"[autolocale] {collection} - no localizable text fields")
            result.skipped = SkipReason.NO_TRANSLATABLE_FIELDS
            return result

        if self._gate_closed(event.document):
            logger.debug(f"[autolocale] {collection}#{event.record_id} - {self.options.guard_flag_field} is false")
            result.skipped = SkipReason.GATE_CLOSED
            return result

        source_locale, record = await resolve_source(
            self.store, collection, event.document, fields, settings, self.options.source_locale
        )
        result.source_locale = source_locale
        fields = expand_fields(record, fields)
        if result.record_id is None:
            result.record_id = record.get('id')
        record_ref = f"{collection}#{result.record_id}"

        source_values: Dict[str, str] = {}
        rich_sources: Dict[str, Any] = {}
        for field in fields:
            value = localized_value(record, field.path, source_locale)
            source_values[field.path] = to_plain_text(value)
            if field.is_rich_text and detect_document(value).is_recognized:
                rich_sources[field.path] = value

        if not any(text.strip() for text in source_values.values()):
            logger.info(f"[autolocale] {record_ref} - no source text found in any locale")
            result.skipped = SkipReason.NO_SOURCE_CONTENT
            return result

        logger.info(f"[autolocale] {record_ref} - source locale: {source_locale}")

        targets = self._resolve_target_locales(settings, source_locale)
        to_fill: Dict[str, List[FieldDescriptor]] = {}
        for locale, missing in validation.collect_missing(record, fields, targets).items():
            logger.debug(f"[autolocale] {record_ref} - {validation.get_locale_stats(record, fields, locale)}")
            # Nothing to translate from for fields blank in the source
            translatable = [f for f in missing if source_values[f.path].strip()]
            if translatable:
                to_fill[locale] = translatable

        if not to_fill:
            logger.debug(f"[autolocale] {record_ref} - all target locales complete")
            result.skipped = SkipReason.NOTHING_MISSING
            return result

        summary = {locale: [f.path for f in missing] for locale, missing in to_fill.items()}
        logger.info(f"[autolocale] {record_ref} - to fill: {summary}")

        fields_by_path = {field.path: field for field in fields}
        extra_context = {
            "collection": collection,
            "knownKeys": [field.path for field in fields],
            "hints": dict(self.options.context_hints),
        }

        # One locale at a time: no interleaved writes, one model call in flight
        for locale, missing in to_fill.items():
            request = TranslationRequest(
                source_locale=source_locale,
                target_locale=locale,
                fields=[field.path for field in missing],
                source_values={field.path: source_values[field.path] for field in missing},
            )
            result.requests.append(request)

            try:
                await self._fill_locale(
                    collection, record, request, fields_by_path, rich_sources, extra_context, result,
                    settings.locales,
                )
            except LocalizationError as e:
                logger.error(f"[autolocale] {record_ref} {source_locale}->{locale} failed: {e}")
                result.failed_locales[locale] = str(e)
            except Exception as e:
                logger.exception(f"[autolocale] {record_ref} {source_locale}->{locale} failed unexpectedly")
                result.failed_locales[locale] = str(e) or e.__class__.__name__

        return result

    def _skip_for_dialect(self, record: Dict[str, Any], path: str, locale: str) -> bool:
        """True when the target already holds a value of the configured legacy dialect."""
        dialect = self.options.skip_target_dialect
        if not dialect:
            return False
        existing = localized_value(record, path, locale)
        if existing is None:
            return False
        return detect_document(existing).kind.value == dialect

    def build_patch(
        self,
        record: Dict[str, Any],
        request: TranslationRequest,
        translations: Dict[str, str],
        fields_by_path: Dict[str, FieldDescriptor],
        rich_sources: Dict[str, Any],
        locales: Optional[List[str]] = None,
    ) -> TranslationPatch:
        """
        Turn sanitized translations into a nested patch for one locale.

        Plain and multiline text is assigned as-is; rich text is reinjected
        into the retained source document. Blank translations and fields
        guarded by skip_target_dialect are left out. Lists of blocks on the
        way to a field are written back whole, scoped to the target locale.
        """
        pairs = []
        for path in request.fields:
            text = translations.get(path, '')
            if not text.strip():
                logger.debug(f"  {path}: empty translation, not written")
                continue
            if self._skip_for_dialect(record, path, request.target_locale):
                logger.info(
                    f"  {path}: target value is {self.options.skip_target_dialect}, not overwritten"
                )
                continue

            field = fields_by_path.get(path)
            if field is not None and field.is_rich_text and path in rich_sources:
                pairs.append((path, reinject(rich_sources[path], text)))
            else:
                pairs.append((path, text))

        return build_patch_from_pairs(pairs, record, request.target_locale, locales)

    async def _fill_locale(
        self,
        collection: str,
        record: Dict[str, Any],
        request: TranslationRequest,
        fields_by_path: Dict[str, FieldDescriptor],
        rich_sources: Dict[str, Any],
        extra_context: Dict[str, Any],
        result: ReconcileResult,
        locales: Optional[List[str]] = None,
    ):
        record_ref = f"{collection}#{result.record_id}"
        locale_pair = f"{request.source_locale}->{request.target_locale}"

        system_prompt, user_prompt = build_prompt(collection, request, extra_context)
        logger.debug(f"  Input to AI (prompt):\n{user_prompt}")

        output = await self.client.complete(system_prompt, user_prompt)
        if not isinstance(output, dict):
            raise LLMRequestFailed(f"Model returned {type(output).__name__}, expected a JSON object")

        translations, _ = sanitize_model_output(output, request.fields)
        patch = self.build_patch(record, request, translations, fields_by_path, rich_sources, locales)

        if not patch:
            logger.info(f"[autolocale] {record_ref} {locale_pair} - nothing to write")
            return

        logger.info(f"[autolocale] {record_ref} {locale_pair} patch: {patch}")

        if self.options.dry_run:
            logger.info(f"[autolocale][dryRun] {record_ref} -> {request.target_locale}: {patch}")
            result.dry_run_patches[request.target_locale] = patch
            return

        try:
            await self.store.update_record_locale(
                collection,
                result.record_id,
                request.target_locale,
                patch,
                skip_access_control=True,
                request_marker=GuardToken.issue(),
            )
        except Exception as e:
            raise WriteBackFailed(
                f"Write-back of {request.target_locale} rejected: {e}",
                details={"collection": collection, "record_id": result.record_id,
                         "locale": request.target_locale},
            ) from e

        result.written_locales.append(request.target_locale)


def localize_collection(
    client_options: ClientOptions,
    store: RecordStore,
    options: Optional[LocalizeOptions] = None,
    transport=None,
) -> LocalizationManager:
    """
    Create the post-change hook for one collection.

    Raises:
        ConfigurationError: If the client options are unusable.

    Example:
        >>> hook = localize_collection(
        ...     client_options_from_config(load_config()),
        ...     store,
        ...     LocalizeOptions(fields=['title', 'description'], guard_flag_field='autoLocalize'),
        ... )
        >>> document = await hook(event)
    """
    validate_ai_config(client_options)
    client = LLMClient(client_options, transport=transport)
    return LocalizationManager(client, store, options)
