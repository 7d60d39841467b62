from dataclasses import dataclass
from zoneinfo import ZoneInfo
import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)

PLUGIN_VERSION = "1.0.0"


@dataclass(frozen=True, slots=True)
class ConfigurationValidationResult:
    """Outcome of checking whether the settings allow talking to a backend."""
    is_valid: bool
    message: str = ""


class Settings(BaseSettings):
    """Plugin settings loaded from environment variables.

    Field validators reject malformed values at startup. Whether the
    configuration is complete enough to reach the Recording Service is a
    separate question answered by ``validate_configuration``.
    """

    api_host: str = ""
    api_port: int = 8089
    streaming_port: int = 7522
    use_https: bool = False
    username: str = ""
    password: str = ""
    request_timeout_sec: float = 30.0

    enable_timer_cache: bool = True
    timer_cache_ttl_sec: int = 20  # Fixed expiry of the cached timer list

    local_timezone: str = "UTC"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="DVBVIEWER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("api_host")
    @classmethod
    def normalize_host(cls, value: str) -> str:
        """Strip whitespace, scheme and trailing slashes from the host."""
        value = value.strip()
        for prefix in ("http://", "https://"):
            if value.lower().startswith(prefix):
                value = value[len(prefix):]
        return value.rstrip("/")

    @field_validator("api_port", "streaming_port")
    @classmethod
    def validate_port(cls, value: int, info) -> int:
        """Validate TCP port range."""
        if not 0 < value < 65536:
            raise ValueError(f"{info.field_name} must be between 1 and 65535")
        return value

    @field_validator("request_timeout_sec")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        """Validate backend request timeout (seconds)."""
        if value <= 0:
            raise ValueError("request_timeout_sec must be > 0")
        return value

    @field_validator("timer_cache_ttl_sec")
    @classmethod
    def validate_cache_ttl(cls, value: int) -> int:
        """Validate timer cache expiry (seconds)."""
        if value <= 0:
            raise ValueError("timer_cache_ttl_sec must be > 0")
        return value

    @field_validator("local_timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Validate IANA timezone string"""
        if value == "UTC":
            return value
        try:
            ZoneInfo(value)
            return value
        except (KeyError, ValueError):
            raise ValueError(f"Invalid timezone: {value}. Must be a valid IANA timezone or 'UTC'")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        normalized = value.upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if normalized not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}")
        return normalized

    def __init__(self, **data):
        """Initialize settings and log configuration."""
        super().__init__(**data)

        logger.info("Configuration loaded:")
        logger.info("  Recording Service: %s", self.api_base_url if self.api_host else "not configured")
        logger.info("  Streaming Port: %s", self.streaming_port)
        logger.info("  Authentication: %s", "enabled" if self.username else "disabled")
        logger.info("  Request Timeout: %ss", self.request_timeout_sec)
        logger.info(
            "  Timer Cache: %s",
            f"enabled ({self.timer_cache_ttl_sec}s)" if self.enable_timer_cache else "disabled",
        )
        logger.info("  Local Timezone: %s", self.local_timezone)

    @property
    def scheme(self) -> str:
        return "https" if self.use_https else "http"

    @property
    def api_base_url(self) -> str:
        return f"{self.scheme}://{self.api_host}:{self.api_port}"

    @property
    def streaming_base_url(self) -> str:
        return f"{self.scheme}://{self.api_host}:{self.streaming_port}"

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.local_timezone)

    def validate_configuration(self) -> ConfigurationValidationResult:
        """
        Check whether the adapter can be pointed at a Recording Service.

        Never raises; the status query turns an invalid result into an
        Unavailable status.
        """
        if not self.api_host:
            return ConfigurationValidationResult(False, "Recording Service host is not set")
        if self.password and not self.username:
            return ConfigurationValidationResult(False, "Password is set without a username")
        if self.api_port == self.streaming_port:
            return ConfigurationValidationResult(False, "API port and streaming port must differ")
        return ConfigurationValidationResult(True)


_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the process-wide settings, loading them on first use.

    Returns:
        The global Settings
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """
    Drop the cached settings (mainly for testing).

    WARNING: Only use this in test environments!
    """
    global _settings
    _settings = None


def setup_logging(level: str = "INFO") -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
