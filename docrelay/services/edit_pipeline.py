"""
Edit pipeline: detect -> resolve credentials -> launch -> dispatch -> verify.

Input and authentication failures are raised before any browser resource is
created. Everything raised while the browser is being driven is mapped onto
the RelayError taxonomy; anything unexpected becomes AutomationFailure.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from docrelay.adapters.base import PlatformAdapter
from docrelay.adapters.registry import build_adapter
from docrelay.config import RelaySettings
from docrelay.errors import (
    AuthenticationRequired,
    AutomationFailure,
    ElementTimeout,
    InputError,
    LoadTimeout,
    RelayError,
    UnrecognizedPlatform,
    UnsupportedOperation,
    VerificationFailed,
)
from docrelay.schemas.edit_schema import ActionKind, EditDocRequest, OperationResult
from docrelay.services.browser_session import BrowserLauncher
from docrelay.services.credential_resolver import CredentialResolver
from docrelay.services.dispatcher import ActionPlan, classify, execute
from docrelay.services.platform_detector import PlatformDescriptor, PlatformDetector

logger = logging.getLogger(__name__)

VERIFY_PREFIX_CHARS = 50

MUTATING_ACTIONS = frozenset(
    {
        ActionKind.ADD_TEXT,
        ActionKind.REPLACE_ALL,
        ActionKind.SET_TITLE_OR_HEADING,
        ActionKind.ADD_LIST,
        ActionKind.FIND_AND_REPLACE,
    }
)

AdapterFactory = Callable[[PlatformDescriptor, Page, RelaySettings], PlatformAdapter]


class EditPipeline:
    def __init__(
        self,
        settings: RelaySettings,
        detector: PlatformDetector,
        resolver: CredentialResolver,
        launcher: BrowserLauncher,
        adapter_factory: AdapterFactory = build_adapter,
    ):
        self.settings = settings
        self.detector = detector
        self.resolver = resolver
        self.launcher = launcher
        self.adapter_factory = adapter_factory

    async def run(self, request: EditDocRequest) -> OperationResult:
        start = time.monotonic()
        url = (request.target_url or "").strip()
        instruction = request.instruction or ""
        if not url or not instruction.strip():
            raise InputError("The 'targetUrl' and 'instruction' are required in the request body.")

        platform = self.detector.detect_url(url)
        if platform is None:
            raise UnrecognizedPlatform(f"Unsupported document platform for URL {url}")

        plan = classify(instruction, request.action_hint, request.options, platform=platform)
        if not platform.supports(plan.kind):
            raise UnsupportedOperation(platform.name, plan.kind.value)

        credential = await self.resolver.resolve(request, platform)

        try:
            async with self.launcher.session(credential, url) as handle:
                adapter = self.adapter_factory(platform, handle.page, self.settings)
                await self._wait_ready(adapter, platform)
                message, verified, warnings = await self._perform(adapter, plan, instruction)
        except RelayError:
            raise
        except PlaywrightTimeoutError as exc:
            logger.warning("edit_doc element wait expired platform=%s action=%s", platform.name, plan.kind.value)
            raise ElementTimeout(
                f"{platform.name} did not respond within {self.settings.element_timeout_ms}ms: {exc}"
            ) from exc
        except Exception as exc:
            logger.exception("edit_doc unexpected failure platform=%s action=%s", platform.name, plan.kind.value)
            raise AutomationFailure(f"An error occurred during automation: {exc}") from exc

        elapsed_ms = (time.monotonic() - start) * 1000
        logger.info(
            "edit_doc platform=%s action=%s auth=%s verified=%s elapsed_ms=%.1f",
            platform.name,
            plan.kind.value,
            credential.mode.value,
            verified,
            elapsed_ms,
        )
        return OperationResult(
            succeeded=True,
            platform=platform.name,
            actionPerformed=plan.kind,
            message=message,
            verified=verified,
            warnings=warnings,
            authMethod=credential.mode.value,
            url=url,
        )

    async def _wait_ready(self, adapter: PlatformAdapter, platform: PlatformDescriptor) -> None:
        try:
            await adapter.wait_until_interactive()
        except LoadTimeout as exc:
            if not await adapter.is_authenticated():
                raise AuthenticationRequired(
                    f"{platform.name} session is not logged in. Please log in again.",
                    platform=platform.name,
                    login_url=platform.login_url,
                ) from exc
            raise

    async def _perform(
        self, adapter: PlatformAdapter, plan: ActionPlan, instruction: str
    ) -> tuple[str, bool | None, list[str]]:
        warnings: list[str] = []
        try:
            message = await execute(adapter, plan)
        except VerificationFailed as exc:
            logger.warning("verification failed platform=%s action=%s: %s", adapter.platform_name, plan.kind.value, exc.message)
            warnings.append(exc.message)
            return f"Executed {plan.kind.value} on {adapter.platform_name}.", False, warnings

        if plan.kind not in MUTATING_ACTIONS:
            return message, None, warnings

        verified = await self._verify(adapter, instruction)
        if not verified:
            note = "Could not confirm the edit on the page; it may still have been applied."
            logger.warning("verification failed platform=%s action=%s", adapter.platform_name, plan.kind.value)
            warnings.append(note)
        return message, verified, warnings

    async def _verify(self, adapter: PlatformAdapter, instruction: str) -> bool:
        probe = instruction.strip()[:VERIFY_PREFIX_CHARS]
        try:
            return await adapter.verify_text_present(probe)
        except Exception as exc:
            logger.warning("verification error platform=%s error=%s", adapter.platform_name, exc)
            return False
