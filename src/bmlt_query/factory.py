"""Library-level convenience functions."""

from __future__ import annotations

import platform
from typing import Optional, Sequence

from bmlt_query import urls
from bmlt_query._version import DEFAULT_USER_AGENT, __version__
from bmlt_query.client import BmltClient
from bmlt_query.enums import BmltDataFormat, BmltEndpoint
from bmlt_query.exceptions import BmltQueryError
from bmlt_query.geocoding import GeocodingService


def create_client(
    root_server_url: str,
    default_format: BmltDataFormat = BmltDataFormat.JSON,
    timeout: int = 30,
    user_agent: str = DEFAULT_USER_AGENT,
    enable_geocoding: bool = True,
    geocoding_service: Optional[GeocodingService] = None,
) -> BmltClient:
    return BmltClient(
        root_server_url,
        default_format=default_format,
        timeout=timeout,
        user_agent=user_agent,
        enable_geocoding=enable_geocoding,
        geocoding_service=geocoding_service,
    )


def create_geocoding_service(
    timeout: int = 10,
    retry_count: int = 3,
    user_agent: str = DEFAULT_USER_AGENT,
    country_code: Optional[str] = None,
    viewbox: Optional[Sequence[float]] = None,
    bounded: bool = False,
) -> GeocodingService:
    return GeocodingService(
        timeout=timeout,
        retry_count=retry_count,
        user_agent=user_agent,
        country_code=country_code,
        viewbox=viewbox,
        bounded=bounded,
    )


def is_valid_root_server_url(url: str) -> bool:
    """Return True if *url* would be accepted as a root server URL."""
    try:
        urls.validate_root_server_url(url)
    except BmltQueryError:
        return False
    return True


def get_version() -> str:
    return __version__


def get_info() -> dict:
    """Describe the library (useful for diagnostics and bug reports)."""
    return {
        "name": "BMLT Python Query Client",
        "version": __version__,
        "description": (
            "A Python client for querying BMLT (Basic Meeting List Tool) "
            "servers with built-in geocoding support"
        ),
        "license": "MIT",
        "python_version": platform.python_version(),
        "supported_formats": [fmt.value for fmt in BmltDataFormat],
        "supported_endpoints": [endpoint.value for endpoint in BmltEndpoint],
    }
