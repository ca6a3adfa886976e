from __future__ import annotations

from playwright.async_api import Page

from docrelay.adapters.base import PlatformAdapter
from docrelay.adapters.google_docs import DocsAdapter
from docrelay.adapters.google_slides import SlidesAdapter
from docrelay.adapters.notion import NotesAdapter
from docrelay.config import RelaySettings
from docrelay.errors import UnsupportedOperation
from docrelay.services.platform_detector import PlatformDescriptor

ADAPTERS: dict[str, type[PlatformAdapter]] = {
    DocsAdapter.platform_name: DocsAdapter,
    SlidesAdapter.platform_name: SlidesAdapter,
    NotesAdapter.platform_name: NotesAdapter,
}


def build_adapter(platform: PlatformDescriptor, page: Page, settings: RelaySettings) -> PlatformAdapter:
    adapter_cls = ADAPTERS.get(platform.name)
    if adapter_cls is None:
        raise UnsupportedOperation(platform.name, "browser automation")
    return adapter_cls(
        page,
        element_timeout_ms=settings.element_timeout_ms,
        auth_check_timeout_ms=settings.auth_check_timeout_ms,
        verify_timeout_ms=settings.verify_timeout_ms,
    )
