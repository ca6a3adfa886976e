"""
Notion recipes.

Blocks are created with Notion's markdown shortcuts ("# ", "- ", "1. ")
typed at the start of a fresh block.
"""

from __future__ import annotations

from playwright.async_api import Locator
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from docrelay.adapters.base import PlatformAdapter
from docrelay.errors import LoadTimeout, UnsupportedFormatting

FORMAT_SHORTCUTS = {
    "bold": "Control+B",
    "italic": "Control+I",
    "underline": "Control+U",
}


class NotesAdapter(PlatformAdapter):
    platform_name = "Notion"

    @property
    def editor(self) -> Locator:
        return self.page.locator('[data-content-editable-root="true"]')

    @property
    def title_block(self) -> Locator:
        return self.page.locator('h1[data-content-editable-leaf="true"]')

    def auth_marker(self) -> Locator:
        return self.page.locator('[data-test-id="sidebar"]')

    def content_surface(self) -> Locator:
        return self.editor

    async def wait_until_interactive(self) -> None:
        try:
            await self.editor.wait_for(state="visible", timeout=self.element_timeout_ms)
            await self.page.wait_for_load_state("networkidle", timeout=self.element_timeout_ms)
            await self.page.locator('[data-test-id="loading-spinner"]').wait_for(
                state="detached", timeout=self.element_timeout_ms
            )
        except PlaywrightTimeoutError as exc:
            raise LoadTimeout(f"Notion page did not load within {self.element_timeout_ms}ms") from exc

    async def _new_block(self) -> None:
        await self.editor.click()
        await self.page.keyboard.press("Control+End")
        await self.page.keyboard.press("Enter")

    async def _type_text(self, text: str) -> None:
        await self._new_block()
        await self.page.keyboard.type(text)

    async def set_title_or_heading(self, text: str, level: int = 1) -> None:
        await self._new_block()
        await self.page.keyboard.type("#" * level + " " + text)

    async def add_list(self, items: list[str], ordered: bool = False) -> None:
        await self._new_block()
        await self.page.keyboard.type("1. " if ordered else "- ")
        for i, item in enumerate(items):
            if i:
                # Enter continues the list block
                await self.page.keyboard.press("Enter")
            await self.page.keyboard.type(item)

    async def apply_formatting(self, kind: str) -> None:
        shortcut = FORMAT_SHORTCUTS.get(kind.lower())
        if shortcut is None:
            raise UnsupportedFormatting(self.platform_name, kind)
        await self.editor.click()
        await self.page.keyboard.press("Control+A")
        await self.page.keyboard.press(shortcut)
