"""
Map a document URL (or a content/filename pair) to a known platform.

The registry is a fixed, ordered tuple built at import time. Every lookup
walks it in document order and the first match wins, so the order below is
the tie-break.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlparse

from docrelay.schemas.edit_schema import ActionKind


@dataclass(frozen=True)
class PlatformDescriptor:
    name: str
    credential_key: str
    match_hosts: tuple[str, ...]
    url_markers: tuple[str, ...] = ()
    file_extensions: tuple[str, ...] = ()
    supported_actions: frozenset[ActionKind] = frozenset()
    login_url: str | None = None

    def supports(self, kind: ActionKind) -> bool:
        return kind in self.supported_actions


GOOGLE_DOCS = PlatformDescriptor(
    name="Google Docs",
    credential_key="google",
    match_hosts=("docs.google.com",),
    url_markers=("docs.google.com/document",),
    supported_actions=frozenset(
        {
            ActionKind.ADD_TEXT,
            ActionKind.REPLACE_ALL,
            ActionKind.SET_TITLE_OR_HEADING,
            ActionKind.ADD_LIST,
            ActionKind.APPLY_FORMATTING,
            ActionKind.FIND_AND_REPLACE,
        }
    ),
    login_url="https://accounts.google.com/signin",
)

GOOGLE_SLIDES = PlatformDescriptor(
    name="Google Slides",
    credential_key="google",
    match_hosts=("slides.google.com",),
    url_markers=("docs.google.com/presentation", "slides.google.com"),
    supported_actions=frozenset({ActionKind.ADD_TEXT, ActionKind.SET_TITLE_OR_HEADING}),
    login_url="https://accounts.google.com/signin",
)

NOTION = PlatformDescriptor(
    name="Notion",
    credential_key="notion",
    match_hosts=("notion.so", "www.notion.so"),
    url_markers=("notion.so",),
    supported_actions=frozenset(
        {
            ActionKind.ADD_TEXT,
            ActionKind.SET_TITLE_OR_HEADING,
            ActionKind.ADD_LIST,
            ActionKind.APPLY_FORMATTING,
        }
    ),
    login_url="https://www.notion.so/login",
)

# Detection-only descriptors for office files; nothing can be edited there.
MICROSOFT_WORD = PlatformDescriptor(
    name="Microsoft Word",
    credential_key="microsoft",
    match_hosts=(),
    file_extensions=(".docx", ".doc"),
    login_url="https://login.microsoftonline.com",
)

MICROSOFT_POWERPOINT = PlatformDescriptor(
    name="Microsoft PowerPoint",
    credential_key="microsoft",
    match_hosts=(),
    file_extensions=(".pptx", ".ppt"),
    login_url="https://login.microsoftonline.com",
)

EDITABLE_PLATFORMS: tuple[PlatformDescriptor, ...] = (GOOGLE_DOCS, GOOGLE_SLIDES, NOTION)
FILE_PLATFORMS: tuple[PlatformDescriptor, ...] = (MICROSOFT_WORD, MICROSOFT_POWERPOINT)


class PlatformDetector:
    """Stateless lookup over an ordered platform registry."""

    def __init__(
        self,
        platforms: tuple[PlatformDescriptor, ...] = EDITABLE_PLATFORMS,
        file_platforms: tuple[PlatformDescriptor, ...] = FILE_PLATFORMS,
    ):
        self.platforms = platforms
        self.file_platforms = file_platforms
        # (host, descriptor) pairs in registry order
        self._hosts: tuple[tuple[str, PlatformDescriptor], ...] = tuple(
            (host, platform) for platform in platforms for host in platform.match_hosts
        )

    def detect_url(self, url: str | None) -> PlatformDescriptor | None:
        """Return the platform for ``url`` or None when nothing matches."""
        if not url or not url.strip():
            return None
        try:
            parsed = urlparse(url.strip())
        except ValueError:
            return None
        hostname = (parsed.hostname or "").lower()
        if not hostname:
            return None

        path = parsed.path.lower()
        for platform in self.platforms:
            for marker in platform.url_markers:
                marker_host, sep, marker_path = marker.partition("/")
                # Host-only markers are covered by the host rules below
                if sep and hostname == marker_host and path.startswith(f"/{marker_path}"):
                    return platform

        for host, platform in self._hosts:
            if hostname == host:
                return platform

        for host, platform in self._hosts:
            if host.removeprefix("www.") in hostname:
                return platform

        return None

    def detect_content(self, content: str | None, filename: str | None = None) -> PlatformDescriptor | None:
        """Detect from embedded platform URLs, then from the file extension."""
        content_lower = (content or "").lower()
        if content_lower:
            for platform in self.platforms:
                if any(marker in content_lower for marker in platform.url_markers):
                    return platform

        filename_lower = (filename or "").lower().strip()
        if filename_lower:
            for platform in self.file_platforms:
                if filename_lower.endswith(platform.file_extensions):
                    return platform

        return None

    def detect(
        self,
        url: str | None = None,
        content: str | None = None,
        filename: str | None = None,
    ) -> PlatformDescriptor | None:
        if url:
            return self.detect_url(url)
        return self.detect_content(content, filename)
