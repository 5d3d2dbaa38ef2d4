"""
Pure extraction of verification artifacts from message content.

Shared by the verification workflow and the email API routes. No I/O, no
state: the same content always yields the same artifacts.
"""

import html
import re
from typing import Optional
from urllib.parse import urlsplit

from email_automation.models.mail_models import ExtractedArtifact, MessageContent


VERIFICATION_MARKERS = ("verify", "confirm", "activate")

_URL = re.compile(r"""https?://[^\s<>"']+""", re.IGNORECASE)
# keyword and "is" are case-insensitive; the code itself is uppercase only
_CODE = re.compile(r"(?i:code|token|otp)\s*(?i:is)?\s*:?\s*([A-Z0-9]{4,8})")
_TRAILING_PUNCTUATION = ".,;:!?)]}"


def _has_marker(url: str) -> bool:
    """Marker anywhere after the host: path, query or fragment."""
    parts = urlsplit(url)
    tail = f"{parts.path}?{parts.query}#{parts.fragment}".lower()
    return any(marker in tail for marker in VERIFICATION_MARKERS)


def extract_verification_links(content: MessageContent) -> list[str]:
    """
    Verification URLs in document order.

    Scans the HTML body when present, otherwise the text body. HTML entities
    inside a URL (``&amp;``) are unescaped; repeated links are kept.

    Args:
        content: Message body

    Returns:
        Matching URLs, empty list if none
    """
    source = content.html or content.text or ""
    links = []
    for match in _URL.finditer(source):
        url = html.unescape(match.group(0)).rstrip(_TRAILING_PUNCTUATION)
        if _has_marker(url):
            links.append(url)
    return links


def extract_verification_code(content: MessageContent) -> Optional[str]:
    """
    First 4-8 character uppercase alphanumeric code following "code", "token"
    or "otp" (optionally "is", then an optional colon).

    Scans the text body when present, otherwise the HTML body.

    Returns:
        The code, or None
    """
    source = content.text or content.html or ""
    match = _CODE.search(source)
    return match.group(1) if match else None


def extract_artifacts(content: MessageContent) -> ExtractedArtifact:
    return ExtractedArtifact(
        links=extract_verification_links(content),
        code=extract_verification_code(content),
    )
