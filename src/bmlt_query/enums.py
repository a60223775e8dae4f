"""Closed value sets used on the BMLT wire."""

from __future__ import annotations

from datetime import date
from enum import Enum, IntEnum


class BmltEndpoint(str, Enum):
    """Semantic API operations, sent as the ``switcher`` parameter."""

    GET_SEARCH_RESULTS = "GetSearchResults"
    GET_FORMATS = "GetFormats"
    GET_SERVICE_BODIES = "GetServiceBodies"
    GET_CHANGES = "GetChanges"
    GET_FIELD_KEYS = "GetFieldKeys"
    GET_FIELD_VALUES = "GetFieldValues"
    GET_NAWS_DUMP = "GetNAWSDump"
    GET_SERVER_INFO = "GetServerInfo"
    GET_COVERAGE_AREA = "GetCoverageArea"


class BmltDataFormat(str, Enum):
    JSON = "json"
    JSONP = "jsonp"
    TSML = "tsml"
    CSV = "csv"


class VenueType(IntEnum):
    IN_PERSON = 1
    VIRTUAL = 2
    HYBRID = 3


class Weekday(IntEnum):
    """BMLT weekday numbering: 1 = Sunday ... 7 = Saturday."""

    SUNDAY = 1
    MONDAY = 2
    TUESDAY = 3
    WEDNESDAY = 4
    THURSDAY = 5
    FRIDAY = 6
    SATURDAY = 7

    @classmethod
    def from_date(cls, day: date) -> Weekday:
        # isoweekday: Monday=1 ... Sunday=7
        return cls(day.isoweekday() % 7 + 1)


class SortKey(str, Enum):
    WEEKDAY = "weekday"
    TIME = "time"
    TOWN = "town"
    STATE = "state"
    WEEKDAY_STATE = "weekday_state"


class Language(str, Enum):
    ENGLISH = "en"
    GERMAN = "de"
    DANISH = "dk"
    SPANISH = "es"
    PERSIAN = "fa"
    FRENCH = "fr"
    ITALIAN = "it"
    POLISH = "pl"
    PORTUGUESE = "pt"
    SWEDISH = "sv"
