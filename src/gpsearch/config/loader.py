import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from gpsearch import __version__
from gpsearch.errors import ConfigError
from gpsearch.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path("gpsearch.config.yaml")
DEFAULT_ENDPOINT = "https://api.godoc.org/search"
DEFAULT_CACHE_TIMEOUT_HOURS = 2
DEFAULT_SORT_FIELD = "import_count"
DEFAULT_NUM = 10
DEFAULT_FIELDS = ("path", "import_count", "synopsis")
CACHE_DIRNAME = "gpsearch"

ENV_CACHE_DIR = "GPSEARCH_CACHEDIR"
ENV_CACHE_TIMEOUT = "GPSEARCH_CACHETIMEOUT"
ENV_ENDPOINT = "GPSEARCH_ENDPOINT"
ENV_CONFIG_PATH = "GPSEARCH_CONFIG"
ENV_LOG_LEVEL = "GPSEARCH_LOG_LEVEL"


class CacheSettings(BaseModel):
    """Where cache entries live and how long they stay fresh."""

    cache_dir: Path
    timeout_hours: int = DEFAULT_CACHE_TIMEOUT_HOURS


class ApiSettings(BaseModel):
    """Upstream search endpoint settings."""

    endpoint: str = DEFAULT_ENDPOINT
    timeout_seconds: float = 20
    user_agent: str = f"gpsearch/{__version__}"


class DisplayDefaults(BaseModel):
    """Defaults for CLI flags that were not given."""

    sort: str = DEFAULT_SORT_FIELD
    num: int = Field(default=DEFAULT_NUM, ge=0)
    fields: List[str] = Field(default_factory=lambda: list(DEFAULT_FIELDS))


class Settings(BaseModel):
    cache: CacheSettings
    api: ApiSettings = Field(default_factory=ApiSettings)
    defaults: DisplayDefaults = Field(default_factory=DisplayDefaults)
    log_level: Optional[str] = None


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """
    Load the YAML config file.

    Args:
        path: Optional path to the config file. Defaults to gpsearch.config.yaml

    Returns:
        Dictionary with the file contents (empty for an empty file)

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ConfigError: If the file is not valid YAML or not a mapping
    """
    cfg_path = path or DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    try:
        with cfg_path.open("r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file {cfg_path} is not valid YAML: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"Config file {cfg_path} must contain a mapping")
    for section in ("cache", "api", "defaults"):
        if section in config and not isinstance(config[section] or {}, dict):
            raise ConfigError(f"Config section '{section}' must be a mapping")
    return config


def load_optional_config(env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """
    Load the config file named by GPSEARCH_CONFIG, or the default file if present.

    An explicitly named file must exist; the default file is optional.
    """
    env = os.environ if env is None else env
    explicit = env.get(ENV_CONFIG_PATH)
    if explicit:
        try:
            return load_config(Path(explicit))
        except FileNotFoundError as e:
            raise ConfigError(str(e)) from e
    try:
        return load_config()
    except FileNotFoundError:
        return {}


def _checked_timeout_hours(value: Union[str, int], source: str) -> Optional[int]:
    try:
        hours = int(str(value).strip())
    except ValueError:
        logger.warning(f"Invalid {source} value {value!r}, ignoring it")
        return None
    if hours < 0:
        logger.warning(f"Negative {source} value {value!r}, ignoring it")
        return None
    return hours


def parse_timeout_hours(value: Union[str, int, None], *, source: str = ENV_CACHE_TIMEOUT) -> int:
    """
    Parse a cache timeout in hours.

    Non-integer and negative values fall back to the default of 2 hours.
    """
    return resolve_timeout_hours([(source, value)])


def resolve_timeout_hours(candidates: List[Tuple[str, Union[str, int, None]]]) -> int:
    """
    Return the first usable timeout among ``(source, value)`` pairs.

    Unset values are skipped; invalid ones are logged and skipped. Falls back
    to the default of 2 hours when nothing is usable.
    """
    for source, value in candidates:
        if value is None or value == "":
            continue
        hours = _checked_timeout_hours(value, source)
        if hours is not None:
            return hours
    return DEFAULT_CACHE_TIMEOUT_HOURS


def resolve_log_level(config: Dict[str, Any], env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Log level from GPSEARCH_LOG_LEVEL, else the config file's ``log_level``."""
    env = os.environ if env is None else env
    return env.get(ENV_LOG_LEVEL) or config.get("log_level")


def default_cache_dir() -> Path:
    return Path(tempfile.gettempdir()) / CACHE_DIRNAME


def resolve_cache_dir(override: Union[str, Path, None] = None) -> Path:
    """
    Resolve the cache directory.

    Args:
        override: User-supplied directory. It must already exist.

    Returns:
        The override, or <tempdir>/gpsearch (created if absent)

    Raises:
        ConfigError: If the override is not an existing directory, or the
            default directory cannot be created
    """
    if override:
        cache_dir = Path(override).expanduser()
        if not cache_dir.is_dir():
            raise ConfigError(f"The specified cache directory {cache_dir} does not exist")
        return cache_dir

    cache_dir = default_cache_dir()
    try:
        cache_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigError(f"Fail to create cache directory {cache_dir}: {e}") from e
    return cache_dir


def _first_set(*values: Any) -> Any:
    for value in values:
        if value is not None and value != "":
            return value
    return None


def resolve_settings(
    env: Optional[Mapping[str, str]] = None,
    *,
    cache_dir: Union[str, Path, None] = None,
    cache_timeout: Union[str, int, None] = None,
    endpoint: Optional[str] = None,
    config: Optional[Dict[str, Any]] = None,
) -> Settings:
    """
    Build runtime settings.

    Precedence, highest first: keyword overrides (CLI flags), environment,
    config file, built-in defaults.

    Args:
        env: Environment mapping (default: os.environ)
        cache_dir: Cache directory override
        cache_timeout: Cache timeout override in hours
        endpoint: Search endpoint override
        config: Pre-loaded config dict. If None, loads the optional config file.

    Returns:
        Validated Settings

    Raises:
        ConfigError: On an unusable cache directory or malformed config values
    """
    env = os.environ if env is None else env
    if config is None:
        config = load_optional_config(env)

    cache_cfg = config.get("cache") or {}
    api_cfg = config.get("api") or {}
    defaults_cfg = config.get("defaults") or {}

    resolved_dir = resolve_cache_dir(
        _first_set(cache_dir, env.get(ENV_CACHE_DIR), cache_cfg.get("dir"))
    )
    timeout_hours = resolve_timeout_hours(
        [
            ("--cache-timeout", cache_timeout),
            (ENV_CACHE_TIMEOUT, env.get(ENV_CACHE_TIMEOUT)),
            ("cache.timeout_hours", cache_cfg.get("timeout_hours")),
        ]
    )


    api_values = dict(api_cfg)
    resolved_endpoint = _first_set(endpoint, env.get(ENV_ENDPOINT))
    if resolved_endpoint:
        api_values["endpoint"] = resolved_endpoint

    try:
        settings = Settings(
            cache=CacheSettings(cache_dir=resolved_dir, timeout_hours=timeout_hours),
            api=ApiSettings(**api_values),
            defaults=DisplayDefaults(**defaults_cfg),
            log_level=resolve_log_level(config, env),
        )
    except (TypeError, ValidationError) as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    logger.debug(
        f"Resolved settings: cache_dir={settings.cache.cache_dir} "
        f"timeout={settings.cache.timeout_hours}h endpoint={settings.api.endpoint}"
    )
    return settings
