"""bmlt_query: typed client for BMLT meeting servers, with geocoding."""

from bmlt_query._version import __version__
from bmlt_query.client import BmltClient
from bmlt_query.enums import (
    BmltDataFormat,
    BmltEndpoint,
    Language,
    SortKey,
    VenueType,
    Weekday,
)
from bmlt_query.exceptions import BmltQueryError, ErrorType
from bmlt_query.factory import (
    create_client,
    create_geocoding_service,
    get_info,
    get_version,
    is_valid_root_server_url,
)
from bmlt_query.geocoding import GeocodingService
from bmlt_query.models import (
    Coordinates,
    Format,
    GeocodeResult,
    Meeting,
    ServerInfo,
    ServiceBody,
)
from bmlt_query.query import MeetingQueryBuilder, QuickSearch

__all__ = [
    "__version__",
    "BmltClient",
    "GeocodingService",
    "MeetingQueryBuilder",
    "QuickSearch",
    "BmltDataFormat",
    "BmltEndpoint",
    "Language",
    "SortKey",
    "VenueType",
    "Weekday",
    "Coordinates",
    "Format",
    "GeocodeResult",
    "Meeting",
    "ServerInfo",
    "ServiceBody",
    "BmltQueryError",
    "ErrorType",
    "create_client",
    "create_geocoding_service",
    "get_info",
    "get_version",
    "is_valid_root_server_url",
]
