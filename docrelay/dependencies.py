"""Process-wide service singletons, exposed as FastAPI dependencies."""

from __future__ import annotations

from docrelay.config import get_settings
from docrelay.services.browser_session import BrowserLauncher
from docrelay.services.credential_resolver import CredentialResolver, TokenValidator
from docrelay.services.edit_pipeline import EditPipeline
from docrelay.services.platform_detector import PlatformDetector
from docrelay.storage.credentials_repo import CredentialsRepo

_detector = PlatformDetector()

# Module-level singletons, created lazily
_credentials_repo: CredentialsRepo | None = None
_pipeline: EditPipeline | None = None


def get_detector() -> PlatformDetector:
    return _detector


def get_credentials_repo() -> CredentialsRepo:
    global _credentials_repo
    if _credentials_repo is None:
        _credentials_repo = CredentialsRepo(base_dir=get_settings().credentials_dir)
    return _credentials_repo


def get_token_validator() -> TokenValidator:
    settings = get_settings()
    return TokenValidator(settings.tokeninfo_url, timeout_s=settings.token_timeout_s)


def get_pipeline() -> EditPipeline:
    global _pipeline
    if _pipeline is None:
        settings = get_settings()
        resolver = CredentialResolver(
            get_credentials_repo(),
            get_token_validator(),
            default_user_id=settings.default_user_id,
        )
        _pipeline = EditPipeline(settings, get_detector(), resolver, BrowserLauncher(settings))
    return _pipeline


def reset() -> None:
    """Drop cached singletons so the next call picks up new settings."""
    global _credentials_repo, _pipeline
    _credentials_repo = None
    _pipeline = None
