from __future__ import annotations

from playwright.async_api import Locator
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from docrelay.adapters.base import PlatformAdapter
from docrelay.errors import LoadTimeout


class SlidesAdapter(PlatformAdapter):
    platform_name = "Google Slides"

    @property
    def canvas(self) -> Locator:
        return self.page.locator(".punch-viewer-content")

    @property
    def title_input(self) -> Locator:
        return self.page.locator('[aria-label*="Rename"]')

    def auth_marker(self) -> Locator:
        return self.page.get_by_role("button", name="Share")

    def content_surface(self) -> Locator:
        return self.canvas

    async def wait_until_interactive(self) -> None:
        try:
            await self.canvas.wait_for(state="visible", timeout=self.element_timeout_ms)
            await self.page.wait_for_load_state("networkidle", timeout=self.element_timeout_ms)
        except PlaywrightTimeoutError as exc:
            raise LoadTimeout(f"Google Slides canvas did not load within {self.element_timeout_ms}ms") from exc

    async def _type_text(self, text: str) -> None:
        await self.canvas.click()
        await self.page.keyboard.type(text)

    async def set_title_or_heading(self, text: str, level: int = 1) -> None:
        title = await self._wait_visible(self.title_input, "Presentation title")
        await title.click()
        await title.fill(text)
        await self.page.keyboard.press("Enter")
