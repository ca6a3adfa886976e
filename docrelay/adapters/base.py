"""
Uniform document-operation façade, one subclass per platform.

Operations a platform cannot perform raise UnsupportedOperation so the
caller can report a meaningful error. Playwright timeouts are translated into
LoadTimeout / ElementTimeout at this layer.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from docrelay.errors import ElementTimeout, UnsupportedOperation, VerificationFailed

logger = logging.getLogger(__name__)


class PlatformAdapter(ABC):
    """Base class for platform-specific page recipes."""

    platform_name: str = "unknown"

    def __init__(
        self,
        page: Page,
        *,
        element_timeout_ms: int = 15000,
        auth_check_timeout_ms: int = 5000,
        verify_timeout_ms: int = 5000,
    ) -> None:
        self.page = page
        self.element_timeout_ms = element_timeout_ms
        self.auth_check_timeout_ms = auth_check_timeout_ms
        self.verify_timeout_ms = verify_timeout_ms

    # ------------------------------------------------------------------ #
    # Required recipes
    # ------------------------------------------------------------------ #

    @abstractmethod
    async def wait_until_interactive(self) -> None:
        """Block until the editing surface is ready or raise LoadTimeout."""
        ...

    @abstractmethod
    def auth_marker(self) -> Locator:
        """Element that only appears for a logged-in user."""
        ...

    @abstractmethod
    def content_surface(self) -> Locator:
        """Element whose text is the document content."""
        ...

    @abstractmethod
    async def _type_text(self, text: str) -> None:
        ...

    # ------------------------------------------------------------------ #
    # Uniform operations
    # ------------------------------------------------------------------ #

    async def is_authenticated(self) -> bool:
        """True when the logged-in marker shows up within the bounded wait."""
        try:
            await self.auth_marker().wait_for(state="visible", timeout=self.auth_check_timeout_ms)
            return True
        except PlaywrightTimeoutError:
            return False
        except Exception as exc:
            logger.warning("auth check failed platform=%s error=%s", self.platform_name, exc)
            return False

    async def add_text(self, text: str) -> None:
        """Append ``text`` and confirm it is present afterwards."""
        await self._type_text(text)
        content = await self.read_content()
        if text not in content:
            raise VerificationFailed(f"Typed text not found on {self.platform_name}: {text[:50]!r}")

    async def replace_all_content(self, text: str) -> None:
        raise UnsupportedOperation(self.platform_name, "replaceAllContent")

    async def set_title_or_heading(self, text: str, level: int = 1) -> None:
        raise UnsupportedOperation(self.platform_name, "setTitleOrHeading")

    async def add_list(self, items: list[str], ordered: bool = False) -> None:
        raise UnsupportedOperation(self.platform_name, "addList")

    async def apply_formatting(self, kind: str) -> None:
        raise UnsupportedOperation(self.platform_name, "applyFormatting")

    async def find_and_replace(self, find: str, replace: str) -> None:
        raise UnsupportedOperation(self.platform_name, "findAndReplace")

    async def read_content(self) -> str:
        return await self.content_surface().text_content() or ""

    async def verify_text_present(self, text: str) -> bool:
        """Best-effort check that ``text`` is visible on the page."""
        if not text.strip():
            return True
        try:
            await self.page.get_by_text(text, exact=False).first.wait_for(
                state="visible", timeout=self.verify_timeout_ms
            )
            return True
        except PlaywrightTimeoutError:
            return False

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    async def _wait_visible(self, locator: Locator, what: str, timeout_ms: int | None = None) -> Locator:
        timeout = timeout_ms if timeout_ms is not None else self.element_timeout_ms
        try:
            await locator.wait_for(state="visible", timeout=timeout)
        except PlaywrightTimeoutError as exc:
            raise ElementTimeout(
                f"{what} not visible on {self.platform_name} after {timeout}ms"
            ) from exc
        return locator
