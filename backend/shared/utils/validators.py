"""
Shared validators for input sanitization.

Business-level checks that the pydantic request models cannot express on
their own (URL safety, image metadata).
"""

import re
from pathlib import PurePosixPath
from urllib.parse import urlparse
from typing import Optional

from shared.config.constants import Limits

# Internal hosts that must never appear in an image URL (SSRF prevention)
BLOCKED_HOSTS = [
    "localhost",
    "127.0.0.1",
    "0.0.0.0",
    "10.",
    "192.168.",
    "169.254.",  # Link-local, cloud metadata
    "[::1]",
    "metadata.google",
]
BLOCKED_HOSTS.extend(f"172.{n}." for n in range(16, 32))

BLOCKED_SCHEMES = {"javascript", "data", "file", "ftp", "mailto", "tel"}

# Mimetype -> file extension used in synthesized image URLs
IMAGE_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}

MAX_URL_LENGTH = 2048


def validate_image_url(url: Optional[str]) -> Optional[str]:
    """
    Validate an image URL.

    Site-relative paths (``/images/dishes/dish_1.jpg``) are accepted as-is;
    absolute URLs must be http(s) and must not point at an internal host.

    Returns:
        The stripped URL, or None for empty input.

    Raises:
        ValueError: If the URL is invalid or potentially malicious.
    """
    if url is None:
        return None

    url = url.strip()
    if not url:
        return None

    if len(url) > MAX_URL_LENGTH:
        raise ValueError(f"URL too long (max {MAX_URL_LENGTH} characters)")

    # Relative path served by this backend
    if url.startswith("/") and not url.startswith("//"):
        if ".." in PurePosixPath(url).parts:
            raise ValueError("Relative image path may not contain '..'")
        return url

    parsed = urlparse(url)
    scheme = parsed.scheme.lower()
    if scheme in BLOCKED_SCHEMES:
        raise ValueError(f"URL scheme not allowed: {scheme}")
    if scheme not in ("http", "https"):
        raise ValueError("Only HTTP/HTTPS URLs or site-relative paths are allowed")

    host = (parsed.hostname or "").lower()
    if not host:
        raise ValueError("URL has no host")

    for blocked in BLOCKED_HOSTS:
        if host.startswith(blocked.strip("[]")):
            raise ValueError("Internal URL not allowed")

    return url


def validate_image_upload(mimetype: str, size: int) -> str:
    """
    Check image metadata and return the file extension for it.

    Raises:
        ValueError: Unsupported mimetype or file too large.
    """
    mimetype = (mimetype or "").lower()
    if mimetype not in Limits.ALLOWED_IMAGE_TYPES:
        allowed = ", ".join(sorted(Limits.ALLOWED_IMAGE_TYPES))
        raise ValueError(f"Unsupported image type: {mimetype or 'unknown'} (allowed: {allowed})")
    if size > Limits.MAX_IMAGE_SIZE_BYTES:
        raise ValueError("Image exceeds the 5MB size limit")
    return IMAGE_EXTENSIONS[mimetype]


_REPORT_FILENAME = re.compile(r"^[a-z]+_report_\d{4}-\d{2}-\d{2}\.(json|csv)$")


def is_report_filename(filename: str) -> bool:
    """True for names produced by the report exporter (no path components)."""
    return bool(_REPORT_FILENAME.match(filename))
