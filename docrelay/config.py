"""
Relay configuration module.

Settings are read from the environment once at process start and kept as a
module-level singleton. Browser launch parameters are fixed.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace

logger = logging.getLogger(__name__)

VERSION = "2.1.0"

DEFAULT_LAUNCH_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
)

DEFAULT_VIEWPORT = {"width": 1920, "height": 1080}

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

GOOGLE_TOKENINFO_URL = "https://www.googleapis.com/oauth2/v1/tokeninfo"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
        return default


@dataclass(frozen=True)
class RelaySettings:
    """Process-wide relay configuration."""
    headless: bool = True
    launch_args: tuple[str, ...] = DEFAULT_LAUNCH_ARGS
    viewport: dict = field(default_factory=lambda: dict(DEFAULT_VIEWPORT))
    user_agent: str = DEFAULT_USER_AGENT
    navigation_timeout_ms: int = 30000
    element_timeout_ms: int = 15000
    auth_check_timeout_ms: int = 5000
    verify_timeout_ms: int = 5000
    token_timeout_s: float = 15.0
    credentials_dir: str = "data/credentials"
    default_user_id: str | None = None
    tokeninfo_url: str = GOOGLE_TOKENINFO_URL
    accept_oauth: bool = True
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    @classmethod
    def from_env(cls) -> "RelaySettings":
        return cls(
            headless=_env_bool("RELAY_HEADLESS", True),
            navigation_timeout_ms=_env_int("RELAY_NAVIGATION_TIMEOUT_MS", 30000),
            element_timeout_ms=_env_int("RELAY_ELEMENT_TIMEOUT_MS", 15000),
            auth_check_timeout_ms=_env_int("RELAY_AUTH_CHECK_TIMEOUT_MS", 5000),
            verify_timeout_ms=_env_int("RELAY_VERIFY_TIMEOUT_MS", 5000),
            credentials_dir=os.environ.get("RELAY_CREDENTIALS_DIR") or "data/credentials",
            default_user_id=os.environ.get("RELAY_DEFAULT_USER") or None,
            tokeninfo_url=os.environ.get("RELAY_TOKENINFO_URL") or GOOGLE_TOKENINFO_URL,
            accept_oauth=_env_bool("RELAY_ACCEPT_OAUTH", True),
            log_level=(os.environ.get("RELAY_LOG_LEVEL") or "INFO").upper(),
            host=os.environ.get("HOST") or "0.0.0.0",
            port=_env_int("PORT", 3000),
        )

    def to_safe_dict(self) -> dict:
        """Return settings without credential-bearing values."""
        return {
            "headless": self.headless,
            "navigationTimeoutMs": self.navigation_timeout_ms,
            "elementTimeoutMs": self.element_timeout_ms,
            "verifyTimeoutMs": self.verify_timeout_ms,
            "credentialsDir": self.credentials_dir,
            "defaultUserSet": bool(self.default_user_id),
            "acceptOauth": self.accept_oauth,
        }


# Module-level singleton, created lazily
_settings: RelaySettings | None = None


def get_settings() -> RelaySettings:
    """Return current relay settings."""
    global _settings
    if _settings is None:
        _settings = RelaySettings.from_env()
    return _settings


def configure_settings(settings: RelaySettings | None = None, **overrides) -> RelaySettings:
    """Replace the process-wide settings.

    With no ``settings`` the current (or environment) settings are used as the
    base and ``overrides`` are applied on top.
    """
    global _settings
    base = settings if settings is not None else get_settings()
    _settings = replace(base, **overrides) if overrides else base
    logger.info("Relay settings configured: %s", _settings.to_safe_dict())
    return _settings
