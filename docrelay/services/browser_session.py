"""
Scoped browser acquisition for one request.

``BrowserLauncher.session()`` starts Playwright, launches an isolated
Chromium, creates a context loaded with the resolved credential, navigates to
the target URL and yields a SessionHandle. Teardown runs exactly once on every
exit path, including exceptions raised by the caller inside the block.
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable

from playwright.async_api import Browser, BrowserContext, Page, Playwright, Route, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from docrelay.config import RelaySettings
from docrelay.errors import AutomationFailure, LoadTimeout
from docrelay.services.credential_resolver import AuthMode, ResolvedCredential

logger = logging.getLogger(__name__)

GOOGLE_API_ROUTE = "https://*.googleapis.com/**"

_TOKEN_INIT_SCRIPT = """
(() => {
  const token = %s;
  try {
    localStorage.setItem('access_token', token);
    sessionStorage.setItem('access_token', token);
  } catch (e) {}
})();
"""


@dataclass
class SessionHandle:
    playwright: Playwright
    browser: Browser
    context: BrowserContext
    page: Page


class BrowserLauncher:
    def __init__(self, settings: RelaySettings, playwright_factory: Callable[[], Any] = async_playwright):
        self.settings = settings
        self._playwright_factory = playwright_factory

    def _context_options(self, credential: ResolvedCredential) -> dict:
        options: dict = {
            "viewport": dict(self.settings.viewport),
            "user_agent": self.settings.user_agent,
        }
        if credential.storage_state is not None:
            options["storage_state"] = credential.storage_state
        return options

    async def _install_token(self, context: BrowserContext, access_token: str) -> None:
        await context.add_init_script(script=_TOKEN_INIT_SCRIPT % json.dumps(access_token))

        async def _with_bearer(route: Route) -> None:
            headers = {**route.request.headers, "authorization": f"Bearer {access_token}"}
            await route.continue_(headers=headers)

        await context.route(GOOGLE_API_ROUTE, _with_bearer)

    @asynccontextmanager
    async def session(self, credential: ResolvedCredential, url: str) -> AsyncIterator[SessionHandle]:
        try:
            playwright = await self._playwright_factory().start()
        except Exception as exc:
            raise AutomationFailure(f"Could not start the browser engine: {exc}") from exc

        browser: Browser | None = None
        context: BrowserContext | None = None
        try:
            try:
                browser = await playwright.chromium.launch(
                    headless=self.settings.headless,
                    args=list(self.settings.launch_args),
                )
                context = await browser.new_context(**self._context_options(credential))
                context.set_default_timeout(self.settings.element_timeout_ms)
                if credential.mode is AuthMode.OAUTH and credential.access_token:
                    await self._install_token(context, credential.access_token)
                page = await context.new_page()
            except PlaywrightError as exc:
                raise AutomationFailure(f"Browser context creation failed: {exc}") from exc

            await self._navigate(page, url)
            yield SessionHandle(playwright=playwright, browser=browser, context=context, page=page)
        finally:
            await self._teardown(playwright, browser, context)

    async def _navigate(self, page: Page, url: str) -> None:
        timeout = self.settings.navigation_timeout_ms
        logger.info("navigate url=%s timeout_ms=%d", url, timeout)
        try:
            await page.goto(url, wait_until="domcontentloaded", timeout=timeout)
        except PlaywrightTimeoutError as exc:
            raise LoadTimeout(f"Navigation to {url} timed out after {timeout}ms") from exc
        except PlaywrightError as exc:
            raise AutomationFailure(f"Navigation to {url} failed: {exc}") from exc

    async def _teardown(
        self,
        playwright: Playwright,
        browser: Browser | None,
        context: BrowserContext | None,
    ) -> None:
        if context is not None:
            try:
                await context.close()
            except Exception as exc:
                logger.warning("context close failed: %s", exc)
        if browser is not None:
            try:
                await browser.close()
            except Exception as exc:
                logger.warning("browser close failed: %s", exc)
        try:
            await playwright.stop()
        except Exception as exc:
            logger.warning("playwright stop failed: %s", exc)
        logger.info("browser session closed")
