from __future__ import annotations

from urllib.parse import quote, unquote, urlsplit

LOCATOR_MARKER = "api-action="

# Characters encodeURIComponent leaves untouched besides alphanumerics.
_COMPONENT_SAFE = "-_.!~*'()"


def encode_component(value: str) -> str:
    return quote(value, safe=_COMPONENT_SAFE)


def decode_component(value: str) -> str:
    return unquote(value)


def decode_locator(locator: str) -> str:
    """Extract the manifest URL carried after ``api-action=``.

    Input without the marker is returned unchanged so plain URLs can be
    passed where a locator is expected.
    """
    parts = locator.split(LOCATOR_MARKER, 1)
    if len(parts) > 1:
        return decode_component(parts[1])
    return locator


def is_absolute_url(url: str) -> bool:
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


_DEFAULT_PORTS = {"http": 80, "https": 443}


def origin_of(url: str) -> str:
    parts = urlsplit(url)
    origin = f"{parts.scheme}://{parts.hostname or ''}"
    if parts.port is not None and parts.port != _DEFAULT_PORTS.get(parts.scheme):
        origin += f":{parts.port}"
    return origin
