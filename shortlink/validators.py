import re
from urllib.parse import urlsplit

MAX_URL_LENGTH = 2048
MAX_CODE_LENGTH = 64

CODE_RE = re.compile(r"[A-Za-z0-9_-]+")
_BAD_URL_CHARS = re.compile(r"[\s\x00-\x1f\x7f]")

# Single-segment paths served by routes other than the redirect.
RESERVED_CODES = {"api", "health", "docs", "redoc", "favicon.ico", "openapi.json"}


def is_valid_url(s: str) -> bool:
    """Accept http(s) URLs; bare domains are treated as http."""
    if not s:
        return False
    s = normalize_url(s)
    if _BAD_URL_CHARS.search(s):
        return False
    try:
        parts = urlsplit(s)
        # .port raises ValueError on a non-numeric or out-of-range port
        parts.port
    except ValueError:
        return False
    if parts.scheme not in ("http", "https"):
        return False
    return bool(parts.hostname)


def is_valid_code(s: str) -> bool:
    return bool(s) and CODE_RE.fullmatch(s) is not None


def normalize_url(s: str) -> str:
    """Give bare domains an explicit http scheme so redirects are absolute."""
    return s if "://" in s else "http://" + s
