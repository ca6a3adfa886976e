"""
Error taxonomy for the relay.

Every failure a request can hit maps onto one of these kinds. Routers turn
them into HTTP errors with ``to_detail()`` as the body.
"""

from __future__ import annotations


class RelayError(Exception):
    """Base class for all relay failures."""

    kind = "AutomationFailure"
    status_code = 500

    def __init__(self, message: str, **extra: object) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_detail(self) -> dict:
        detail = {"succeeded": False, "kind": self.kind, "error": self.message}
        detail.update(self.extra)
        return detail


class InputError(RelayError):
    kind = "InputError"
    status_code = 400


class UnrecognizedPlatform(RelayError):
    kind = "UnrecognizedPlatform"
    status_code = 400


class AuthenticationRequired(RelayError):
    """No usable credential; the caller should start a login flow."""

    kind = "AuthenticationRequired"
    status_code = 401

    def __init__(self, message: str, *, platform: str | None = None, login_url: str | None = None) -> None:
        super().__init__(message, loginRequired=True, platform=platform, loginUrl=login_url)
        self.platform = platform
        self.login_url = login_url


class AuthenticationInvalid(RelayError):
    kind = "AuthenticationInvalid"
    status_code = 401


class LoadTimeout(RelayError):
    kind = "LoadTimeout"


class ElementTimeout(RelayError):
    kind = "ElementTimeout"


class UnsupportedOperation(RelayError):
    kind = "UnsupportedOperation"

    def __init__(self, platform: str, operation: str) -> None:
        super().__init__(
            f"{operation} is not supported on {platform}",
            platform=platform,
            operation=operation,
        )
        self.platform = platform
        self.operation = operation


class UnsupportedFormatting(UnsupportedOperation):
    kind = "UnsupportedFormatting"

    def __init__(self, platform: str, formatting: str) -> None:
        super().__init__(platform, f"formatting '{formatting}'")
        self.formatting = formatting


class VerificationFailed(RelayError):
    """Advisory only: the edit may have landed even though the check missed it."""

    kind = "VerificationFailed"


class AutomationFailure(RelayError):
    kind = "AutomationFailure"
