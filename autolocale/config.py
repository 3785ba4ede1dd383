import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from autolocale.ai.exceptions import ConfigurationError
from autolocale.logger import get_logger, set_log_mode

logger = get_logger(__name__)

DEFAULT_SYSTEM_MESSAGE = "You fill missing localized fields for a CMS."

# Provider configuration constants
BUILTIN_PROVIDERS = ["openai", "deepseek"]

BUILTIN_PROVIDER_DISPLAY_NAMES = {
    "openai": "OpenAI",
    "deepseek": "DeepSeek",
}

API_KEY_PLACEHOLDER = "YOUR_API_KEY_HERE"

# Request-metadata key carrying the guard token on our own writes
GUARD_MARKER_KEY = "x-ai-localize"

# Rich-text dialect names accepted by LocalizeOptions.skip_target_dialect
DIALECT_NAMES = ("tree_of_nodes", "rooted_tree")

CONFIG_ENV_VAR = "AUTOLOCALE_CONFIG"

# Default configuration template
DEFAULT_CONFIG = {
    "ai_provider": "deepseek",
    "openai": {
        "api_key": API_KEY_PLACEHOLDER,
        "models": ["gpt-4o-mini", "gpt-4o"],  # first is default
        "base_url": "https://api.openai.com",
        "temperature": 0.2,
        "max_tokens": 512,
        "timeout_ms": 20000,
        "max_retries": 1,
    },
    "deepseek": {
        "api_key": API_KEY_PLACEHOLDER,
        "models": ["deepseek-chat"],  # first is default
        "base_url": "https://api.deepseek.com",
        "temperature": 0.2,
        "max_tokens": 300,
        "timeout_ms": 20000,
        "max_retries": 1,
    },
    "log_mode": "info",
}


@dataclass
class ClientOptions:
    """Connection settings for an OpenAI-compatible chat-completions endpoint."""
    api_key: str
    model: str
    base_url: str = "https://api.openai.com"
    temperature: float = 0.2
    max_tokens: int = 512
    timeout_ms: int = 20000
    max_retries: int = 1
    retry_backoff: float = 1.0
    provider: str = "openai"

    @property
    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/v1/chat/completions"


@dataclass
class LocalizeOptions:
    """Per-registration options of the localization hook."""
    fields: Optional[List[str]] = None  # None means auto-detect from the schema
    source_locale: Optional[str] = None  # None means auto-detect
    target_locales: Optional[List[str]] = None  # None means all configured locales
    guard_flag_field: Optional[str] = None
    dry_run: bool = False
    skip_target_dialect: Optional[str] = None
    context_hints: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.skip_target_dialect is not None and self.skip_target_dialect not in DIALECT_NAMES:
            raise ConfigurationError(
                f"Unknown rich-text dialect '{self.skip_target_dialect}'",
                details={"allowed": list(DIALECT_NAMES)},
            )


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the configuration.

    DEFAULT_CONFIG is merged with the JSON file at `path` (or the file named by
    the AUTOLOCALE_CONFIG environment variable), then environment overrides are
    applied: `<PROVIDER>_API_KEY` for API keys and AUTOLOCALE_LOG_MODE for the
    log mode.

    Args:
        path: Optional path to a JSON configuration file

    Returns:
        Configuration dictionary
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    config_path = path or os.environ.get(CONFIG_ENV_VAR)
    if config_path:
        config_file = Path(config_path)
        if config_file.exists():
            try:
                with open(config_file, 'r', encoding='utf-8') as f:
                    file_config = json.load(f)
                if isinstance(file_config, dict):
                    config = _deep_merge(config, file_config)
                    logger.debug(f"Configuration loaded from {config_file}")
                else:
                    logger.warning(f"Ignoring non-object configuration in {config_file}")
            except json.JSONDecodeError as e:
                logger.error(f"Failed to parse config file {config_file}: {e}")
                logger.warning("Using default configuration")
        else:
            logger.debug(f"Config file {config_file} not found, using defaults")

    for provider, provider_config in config.items():
        if not isinstance(provider_config, dict):
            continue
        env_key = os.environ.get(f"{provider.upper().replace('-', '_')}_API_KEY")
        if env_key:
            provider_config['api_key'] = env_key

    log_mode = os.environ.get('AUTOLOCALE_LOG_MODE')
    if log_mode:
        config['log_mode'] = log_mode
    set_log_mode(config.get('log_mode'))

    return config


def _get_model(provider_config: Dict[str, Any], model_override: Optional[str] = None) -> str:
    """
    Get the model to use.

    Priority:
    1. model_override (if set)
    2. First model from 'models' array
    3. 'model' field
    """
    if model_override:
        return model_override

    models = provider_config.get('models', [])
    if models and isinstance(models, list) and models[0]:
        return models[0]

    return provider_config.get('model', '')


def client_options_from_config(
    config: Dict[str, Any],
    provider_override: Optional[str] = None,
    model_override: Optional[str] = None,
) -> ClientOptions:
    """
    Build ClientOptions for the configured (or overridden) provider.

    Raises:
        ConfigurationError: If the provider has no configuration block.
    """
    provider = provider_override or config.get('ai_provider', 'deepseek')
    provider_config = config.get(provider)
    if not isinstance(provider_config, dict):
        raise ConfigurationError(
            f"AI provider '{provider}' configuration not found",
            details={"provider": provider},
        )

    options = ClientOptions(
        api_key=provider_config.get('api_key', ''),
        model=_get_model(provider_config, model_override),
        base_url=provider_config.get('base_url', 'https://api.openai.com'),
        temperature=float(provider_config.get('temperature', 0.2)),
        max_tokens=int(provider_config.get('max_tokens', 512)),
        timeout_ms=int(provider_config.get('timeout_ms', 20000)),
        max_retries=int(provider_config.get('max_retries', 1)),
        retry_backoff=float(provider_config.get('retry_backoff', 1.0)),
        provider=provider,
    )
    validate_ai_config(options)
    return options


def validate_ai_config(options: ClientOptions) -> None:
    """
    Validate that the AI client options are usable.

    Raises:
        ConfigurationError: If the API key, model or base URL is missing.
    """
    provider_display = BUILTIN_PROVIDER_DISPLAY_NAMES.get(
        options.provider, options.provider.replace('-', ' ').title()
    )

    if not options.api_key or options.api_key == API_KEY_PLACEHOLDER:
        raise ConfigurationError(
            f"{provider_display} API key not configured",
            details={"provider": options.provider, "missing_field": "api_key"},
        )

    if not options.model:
        raise ConfigurationError(
            f"{provider_display} model not configured",
            details={"provider": options.provider, "missing_field": "models"},
        )

    if not options.base_url:
        raise ConfigurationError(
            f"{provider_display} base URL not configured",
            details={"provider": options.provider, "missing_field": "base_url"},
        )
