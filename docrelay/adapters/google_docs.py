"""Google Docs recipes. The editor lives inside a text-event iframe."""

from __future__ import annotations

from playwright.async_api import Locator
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from docrelay.adapters.base import PlatformAdapter
from docrelay.errors import LoadTimeout, UnsupportedFormatting

EDITOR_IFRAME = "iframe.docs-texteventtarget-iframe"


class DocsAdapter(PlatformAdapter):
    platform_name = "Google Docs"

    FORMAT_BUTTONS = {"bold": "Bold", "italic": "Italic", "underline": "Underline"}

    @property
    def editor(self) -> Locator:
        return self.page.frame_locator(EDITOR_IFRAME).locator('[contenteditable="true"]')

    @property
    def title_input(self) -> Locator:
        return self.page.locator('input[aria-label*="Rename"]')

    def auth_marker(self) -> Locator:
        return self.page.get_by_role("button", name="Share")

    def content_surface(self) -> Locator:
        return self.editor

    async def wait_until_interactive(self) -> None:
        try:
            await self.editor.wait_for(state="visible", timeout=self.element_timeout_ms)
            await self.page.wait_for_load_state("networkidle", timeout=self.element_timeout_ms)
        except PlaywrightTimeoutError as exc:
            raise LoadTimeout(f"Google Docs editor did not load within {self.element_timeout_ms}ms") from exc

    async def _type_text(self, text: str) -> None:
        await self.editor.click()
        await self.page.keyboard.press("Control+End")
        await self.editor.press_sequentially(text)

    async def replace_all_content(self, text: str) -> None:
        await self.editor.click()
        await self.page.keyboard.press("Control+A")
        await self.page.keyboard.type(text)

    async def set_title_or_heading(self, text: str, level: int = 1) -> None:
        # Docs has a document title; the level is ignored
        title = await self._wait_visible(self.title_input, "Document title")
        await title.click()
        await title.fill(text)
        await self.page.keyboard.press("Enter")

    async def add_list(self, items: list[str], ordered: bool = False) -> None:
        await self.editor.click()
        await self.page.keyboard.press("Control+End")
        await self.page.keyboard.press("Enter")
        # Ctrl+Shift+7 numbered, Ctrl+Shift+8 bulleted
        await self.page.keyboard.press("Control+Shift+7" if ordered else "Control+Shift+8")
        for i, item in enumerate(items):
            if i:
                await self.page.keyboard.press("Enter")
            await self.page.keyboard.type(item)

    async def apply_formatting(self, kind: str) -> None:
        button_name = self.FORMAT_BUTTONS.get(kind.lower())
        if button_name is None:
            raise UnsupportedFormatting(self.platform_name, kind)
        await self.editor.click()
        await self.page.keyboard.press("Control+A")
        button = await self._wait_visible(self.page.get_by_role("button", name=button_name), f"{button_name} button")
        await button.click()

    async def find_and_replace(self, find: str, replace: str) -> None:
        await self.editor.click()
        await self.page.keyboard.press("Control+H")
        find_field = await self._wait_visible(self.page.get_by_label("Find", exact=True), "Find field")
        await find_field.fill(find)
        await self.page.get_by_label("Replace with").fill(replace)
        await self.page.get_by_role("button", name="Replace all").click()
        await self.page.keyboard.press("Escape")
