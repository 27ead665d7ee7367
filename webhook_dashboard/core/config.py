"""Configuration loading and validation."""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://trading-backend-30g5.onrender.com/api"
PAGE_SIZE_OPTIONS = (10, 25, 50)
SORTABLE_FIELDS = (
    "ticker", "timenow", "message", "open", "high", "low",
    "close", "price", "volume", "u_interval", "time",
)


class ConfigError(Exception):
    """Raised when configuration is invalid."""

    pass


@dataclass
class ApiConfig:
    """Events endpoint configuration."""

    base_url: str = DEFAULT_BASE_URL
    request_timeout_seconds: float | None = None


@dataclass
class PollerConfig:
    """Polling and retry configuration."""

    max_retries: int = 3
    retry_delay_seconds: float = 2.0
    refresh_interval_seconds: float = 60.0
    retry_format_errors: bool = True


@dataclass
class DashboardConfig:
    """Grid presentation configuration."""

    page_size: int = 10
    sort_field: str = "timenow"
    sort_descending: bool = True
    error_banner_seconds: float = 6.0
    update_banner_seconds: float = 3.0


@dataclass
class Config:
    """Main configuration container."""

    api: ApiConfig
    poller: PollerConfig = field(default_factory=PollerConfig)
    dashboard: DashboardConfig = field(default_factory=DashboardConfig)


def _validate(config: Config) -> None:
    """Check value ranges that YAML can't express."""
    if not config.api.base_url:
        raise ConfigError("api.base_url is required")

    timeout = config.api.request_timeout_seconds
    if timeout is not None and timeout <= 0:
        raise ConfigError(f"api.request_timeout_seconds must be positive, got {timeout}")

    if config.poller.max_retries < 0:
        raise ConfigError(f"poller.max_retries must be >= 0, got {config.poller.max_retries}")

    for name in ("retry_delay_seconds", "refresh_interval_seconds"):
        value = getattr(config.poller, name)
        if value <= 0:
            raise ConfigError(f"poller.{name} must be positive, got {value}")

    if config.dashboard.page_size not in PAGE_SIZE_OPTIONS:
        raise ConfigError(
            f"dashboard.page_size must be one of {list(PAGE_SIZE_OPTIONS)}, "
            f"got {config.dashboard.page_size}"
        )

    if config.dashboard.sort_field not in SORTABLE_FIELDS:
        raise ConfigError(f"dashboard.sort_field is not a grid column: {config.dashboard.sort_field}")


def load_config(path: str) -> Config:
    """Load configuration from YAML file.

    Args:
        path: Path to YAML configuration file

    Returns:
        Config object with validated configuration

    Raises:
        ConfigError: If file not found, invalid YAML, missing required fields
            or out-of-range values
    """
    config_path = Path(path)

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        with open(config_path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML: {e}") from e

    if raw is None:
        raise ConfigError("Configuration file is empty")

    if not isinstance(raw, dict):
        raise ConfigError("Configuration file must contain a mapping")

    # Validate required sections
    required_sections = ["api"]
    for section in required_sections:
        if section not in raw:
            raise ConfigError(f"Missing required configuration section: {section}")

    # Parse API config
    api_raw: dict[str, Any] = raw["api"] or {}
    api = ApiConfig(
        base_url=api_raw.get("base_url", DEFAULT_BASE_URL),
        request_timeout_seconds=api_raw.get("request_timeout_seconds"),
    )

    # Parse poller config
    poller_raw: dict[str, Any] = raw.get("poller") or {}
    poller = PollerConfig(
        max_retries=poller_raw.get("max_retries", 3),
        retry_delay_seconds=poller_raw.get("retry_delay_seconds", 2.0),
        refresh_interval_seconds=poller_raw.get("refresh_interval_seconds", 60.0),
        retry_format_errors=poller_raw.get("retry_format_errors", True),
    )

    # Parse dashboard config
    dash_raw: dict[str, Any] = raw.get("dashboard") or {}
    dashboard = DashboardConfig(
        page_size=dash_raw.get("page_size", 10),
        sort_field=dash_raw.get("sort_field", "timenow"),
        sort_descending=dash_raw.get("sort_descending", True),
        error_banner_seconds=dash_raw.get("error_banner_seconds", 6.0),
        update_banner_seconds=dash_raw.get("update_banner_seconds", 3.0),
    )

    config = Config(api=api, poller=poller, dashboard=dashboard)
    _validate(config)

    logger.info(f"Loaded configuration from {path}")
    logger.debug(f"API: {api.base_url} (timeout={api.request_timeout_seconds})")
    logger.debug(
        f"Poller: max_retries={poller.max_retries}, retry_delay={poller.retry_delay_seconds}s, "
        f"refresh={poller.refresh_interval_seconds}s"
    )

    return config
