"""Request-name and Accept-Encoding helpers.

These are pure functions over plain strings so they stay independent of
how the HTTP layer represents multi-valued headers.
"""

from collections.abc import Iterable
from urllib.parse import quote

from cli_download_server.config import COMPRESSED_SUFFIX

GZIP_CODING = "gzip"
PATH_SEPARATOR = "/"


def encoding_tokens(header_values: Iterable[str]) -> set[str]:
    """Collect the comma-separated tokens of every header occurrence.

    Tokens are whitespace-trimmed and kept case-sensitive; parameters such
    as ";q=0.5" stay attached to their token.
    """
    tokens: set[str] = set()
    for value in header_values:
        for token in value.split(","):
            stripped = token.strip()
            if stripped:
                tokens.add(stripped)
    return tokens


def accepts_gzip(header_values: Iterable[str]) -> bool:
    """Return True if any Accept-Encoding occurrence lists the exact token "gzip"."""
    return GZIP_CODING in encoding_tokens(header_values)


def has_separator(requested_path: str) -> bool:
    return PATH_SEPARATOR in requested_path


def is_compressed_name(requested_path: str) -> bool:
    return requested_path.endswith(COMPRESSED_SUFFIX)


def logical_name(requested_path: str) -> str:
    """Strip the compressed suffix, if present, giving the registry key."""
    return requested_path.removesuffix(COMPRESSED_SUFFIX)


def artifact_name(name: str) -> str:
    """Return the on-disk file name for a logical name."""
    return f"{name}{COMPRESSED_SUFFIX}"


def content_disposition(name: str) -> str:
    """Build an attachment Content-Disposition header for a logical name.

    Header values go out as latin-1, so names outside it get an RFC 6266
    "filename*" parameter with a "_"-substituted ASCII fallback.
    """
    quoted = name.replace("\\", "\\\\").replace('"', '\\"')
    try:
        quoted.encode("latin-1")
    except UnicodeEncodeError:
        fallback = "".join(ch if ch.isascii() else "_" for ch in quoted)
        return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(name, safe='')}"
    return f'attachment; filename="{quoted}"'
