"""Root server URL validation and BMLT request URL construction."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Mapping, Optional
from urllib.parse import urlencode, urlsplit

from bmlt_query.enums import BmltDataFormat, BmltEndpoint
from bmlt_query.exceptions import BmltQueryError
from bmlt_query.models import Coordinates

# Checked in order; only the first match is stripped.
_KNOWN_SUFFIXES = (
    "/client_interface/json",
    "/client_interface",
    "/main_server",
)

_UNSUPPORTED_FORMATS: dict[BmltEndpoint, frozenset[BmltDataFormat]] = {
    BmltEndpoint.GET_SERVER_INFO: frozenset({BmltDataFormat.CSV}),
    BmltEndpoint.GET_COVERAGE_AREA: frozenset({BmltDataFormat.CSV}),
}

_MAX_RADIUS = 100


def validate_root_server_url(url: str) -> None:
    """
    Check that *url* is an absolute http(s) URL.

    Raises BmltQueryError (VALIDATION_ERROR) otherwise.
    """
    if not url or not url.strip():
        raise BmltQueryError.validation_error("Root server URL cannot be empty")

    try:
        parts = urlsplit(url)
    except ValueError:
        raise BmltQueryError.validation_error("Invalid root server URL format")
    if not parts.scheme or not parts.netloc or any(c.isspace() for c in url):
        raise BmltQueryError.validation_error("Invalid root server URL format")

    if parts.scheme.lower() not in ("http", "https"):
        raise BmltQueryError.validation_error(
            "Root server URL must use HTTP or HTTPS"
        )


def normalize_root_server_url(url: str) -> str:
    """
    Normalise to the canonical '.../main_server' form.

    'https://h', 'https://h/', 'https://h/main_server/' and
    'https://h/client_interface/json' all become 'https://h/main_server'.
    """
    url = url.rstrip("/")
    for suffix in _KNOWN_SUFFIXES:
        if url.endswith(suffix):
            url = url[: -len(suffix)]
            break
    if not url.endswith("/main_server"):
        url += "/main_server"
    return url


def validate_endpoint_format(
    endpoint: BmltEndpoint, fmt: BmltDataFormat
) -> None:
    """Reject endpoint/format pairs the server cannot produce."""
    if fmt in _UNSUPPORTED_FORMATS.get(endpoint, frozenset()):
        raise BmltQueryError.validation_error(
            f"Format {fmt.value} is not supported for endpoint {endpoint.value}"
        )


def validate_coordinates(coordinates: Coordinates) -> None:
    """Latitude is checked before longitude."""
    if not -90 <= coordinates.latitude <= 90:
        raise BmltQueryError.validation_error(
            "Latitude must be between -90 and 90 degrees"
        )
    if not -180 <= coordinates.longitude <= 180:
        raise BmltQueryError.validation_error(
            "Longitude must be between -180 and 180 degrees"
        )


def validate_radius(radius: float) -> None:
    """Radius is unit-less here; the caller tracks miles vs. kilometres."""
    if radius <= 0:
        raise BmltQueryError.validation_error("Radius must be greater than 0")
    if radius > _MAX_RADIUS:
        raise BmltQueryError.validation_error(
            f"Radius cannot exceed {_MAX_RADIUS} miles/km"
        )


def build_bmlt_url(
    root_server_url: str,
    endpoint: BmltEndpoint,
    fmt: BmltDataFormat,
    parameters: Optional[Mapping[str, Any]] = None,
) -> str:
    """
    Assemble the full semantic API URL for *endpoint*.

    The path always ends in '/client_interface/json/'; any other format is
    selected with the 'data_format_type' query parameter.
    """
    validate_root_server_url(root_server_url)
    validate_endpoint_format(endpoint, fmt)

    base = root_server_url.rstrip("/")

    query: dict[str, Any] = dict(parameters or {})
    query["switcher"] = endpoint.value
    if fmt is not BmltDataFormat.JSON:
        query["data_format_type"] = fmt.value

    pairs = list(_encode_pairs(query))
    return f"{base}/client_interface/json/?{urlencode(pairs)}"


# ── Query encoding ────────────────────────────────────────────────


def _scalar(value: Any) -> str:
    """Render one value the way the server's PHP query parser expects."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _encode_pairs(query: Mapping[str, Any]) -> Iterable[tuple[str, str]]:
    for key, value in query.items():
        if value is None or value == "":
            continue
        if isinstance(value, (list, tuple, set, frozenset)):
            for item in value:
                if item is None or item == "":
                    continue
                yield f"{key}[]", _scalar(item)
        else:
            yield key, _scalar(value)
