"""Typed records for BMLT and geocoding responses."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Optional

from bmlt_query.enums import VenueType
from bmlt_query.exceptions import BmltQueryError


# ── Coercion helpers ──────────────────────────────────────────────


def _require(data: Mapping[str, Any], key: str, record: str) -> Any:
    """Return ``data[key]`` or fail loudly so server contract drift surfaces."""
    if key not in data or data[key] is None:
        raise BmltQueryError.response_error(
            f"Missing required field '{key}' in {record} record"
        )
    return data[key]


def _opt_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _opt_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


def _opt_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def split_list(value: Any) -> tuple[str, ...]:
    """
    Split a comma-separated string into trimmed tokens, e.g. 'BM, O' -> ('BM', 'O').

    Lists are accepted too (some servers pre-split) and trimmed token-wise.
    Blank input yields an empty tuple.
    """
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(str(v).strip() for v in value)
    text = str(value)
    if not text.strip():
        return ()
    return tuple(part.strip() for part in text.split(","))


# ── Records ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class Coordinates:
    """A WGS84 latitude/longitude pair. Range checks live in bmlt_query.urls."""

    latitude: float
    longitude: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Coordinates:
        return cls(
            latitude=float(_require(data, "latitude", "Coordinates")),
            longitude=float(_require(data, "longitude", "Coordinates")),
        )

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True)
class Meeting:
    """One recurring meeting as returned by GetSearchResults."""

    id_bigint: str
    meeting_name: str
    weekday_tinyint: int                # 1=Sunday ... 7=Saturday
    start_time: str                     # HH:MM:SS
    end_time: Optional[str] = None
    duration_time: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location_text: Optional[str] = None
    location_street: Optional[str] = None
    location_city_subsection: Optional[str] = None
    location_neighborhood: Optional[str] = None
    location_municipality: Optional[str] = None
    location_sub_province: Optional[str] = None
    location_province: Optional[str] = None
    location_postal_code_1: Optional[str] = None
    location_nation: Optional[str] = None
    comments: Optional[str] = None
    train_lines: Optional[str] = None
    bus_lines: Optional[str] = None
    venue_type: Optional[int] = None    # 1=in-person, 2=virtual, 3=hybrid
    virtual_meeting_link: Optional[str] = None
    phone_meeting_number: Optional[str] = None
    virtual_meeting_additional_info: Optional[str] = None
    distance_in_km: Optional[float] = None     # proximity searches only
    distance_in_miles: Optional[float] = None  # proximity searches only
    formats: tuple[str, ...] = field(default_factory=tuple)
    format_shared_id_list: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Meeting:
        return cls(
            id_bigint=str(_require(data, "id_bigint", "Meeting")),
            meeting_name=str(_require(data, "meeting_name", "Meeting")),
            weekday_tinyint=int(_require(data, "weekday_tinyint", "Meeting")),
            start_time=str(_require(data, "start_time", "Meeting")),
            end_time=_opt_str(data.get("end_time")),
            duration_time=_opt_str(data.get("duration_time")),
            latitude=_opt_float(data.get("latitude")),
            longitude=_opt_float(data.get("longitude")),
            location_text=_opt_str(data.get("location_text")),
            location_street=_opt_str(data.get("location_street")),
            location_city_subsection=_opt_str(
                data.get("location_city_subsection")
            ),
            location_neighborhood=_opt_str(data.get("location_neighborhood")),
            location_municipality=_opt_str(data.get("location_municipality")),
            location_sub_province=_opt_str(data.get("location_sub_province")),
            location_province=_opt_str(data.get("location_province")),
            location_postal_code_1=_opt_str(data.get("location_postal_code_1")),
            location_nation=_opt_str(data.get("location_nation")),
            comments=_opt_str(data.get("comments")),
            train_lines=_opt_str(data.get("train_lines")),
            bus_lines=_opt_str(data.get("bus_lines")),
            venue_type=_opt_int(data.get("venue_type")),
            virtual_meeting_link=_opt_str(data.get("virtual_meeting_link")),
            phone_meeting_number=_opt_str(data.get("phone_meeting_number")),
            virtual_meeting_additional_info=_opt_str(
                data.get("virtual_meeting_additional_info")
            ),
            distance_in_km=_opt_float(data.get("distance_in_km")),
            distance_in_miles=_opt_float(data.get("distance_in_miles")),
            formats=split_list(data.get("formats")),
            format_shared_id_list=split_list(data.get("format_shared_id_list")),
        )

    @property
    def venue(self) -> Optional[VenueType]:
        """The venue type as an enum, or None if unset or unrecognised."""
        if self.venue_type is None:
            return None
        try:
            return VenueType(self.venue_type)
        except ValueError:
            return None

    @property
    def coordinates(self) -> Optional[Coordinates]:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinates(self.latitude, self.longitude)

    def to_dict(self) -> dict:
        d = asdict(self)
        d["formats"] = list(self.formats)
        d["format_shared_id_list"] = list(self.format_shared_id_list)
        return d


@dataclass(frozen=True)
class Format:
    """A meeting format (attribute tag) definition."""

    id: str
    key_string: str
    name_string: str
    description_string: Optional[str] = None
    lang: str = "en"
    format_type_enum: str = "FC3"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Format:
        return cls(
            id=str(_require(data, "id", "Format")),
            key_string=str(_require(data, "key_string", "Format")),
            name_string=str(_require(data, "name_string", "Format")),
            description_string=_opt_str(data.get("description_string")),
            lang=str(data.get("lang") or "en"),
            format_type_enum=str(data.get("format_type_enum") or "FC3"),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ServiceBody:
    """An organisational unit; ``parent_id`` points at another ServiceBody."""

    id: str
    name: str
    type: str
    description: Optional[str] = None
    parent_id: Optional[str] = None
    uri: Optional[str] = None
    kml_uri: Optional[str] = None
    helpline: Optional[str] = None
    world_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ServiceBody:
        return cls(
            id=str(_require(data, "id", "ServiceBody")),
            name=str(_require(data, "name", "ServiceBody")),
            type=str(_require(data, "type", "ServiceBody")),
            description=_opt_str(data.get("description")),
            parent_id=_opt_str(data.get("parent_id")),
            uri=_opt_str(data.get("uri")),
            kml_uri=_opt_str(data.get("kml_uri")),
            helpline=_opt_str(data.get("helpline")),
            world_id=_opt_str(data.get("world_id")),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ServerInfo:
    version: str
    semantic_admin_server_base_uri: Optional[str] = None
    langs: Optional[tuple[str, ...]] = None
    charset: Optional[str] = None
    server_time_zone_info: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ServerInfo:
        langs = data.get("langs")
        return cls(
            version=str(_require(data, "version", "ServerInfo")),
            semantic_admin_server_base_uri=_opt_str(
                data.get("semantic_admin_server_base_uri")
            ),
            langs=split_list(langs) if langs not in (None, "") else None,
            charset=_opt_str(data.get("charset")),
            server_time_zone_info=data.get("server_time_zone_info"),
        )

    def to_dict(self) -> dict:
        d = asdict(self)
        if self.langs is not None:
            d["langs"] = list(self.langs)
        return d


@dataclass(frozen=True)
class GeocodeResult:
    """A resolved location; ``raw_data`` keeps the provider's full record."""

    coordinates: Coordinates
    display_name: str
    raw_data: Optional[dict] = None

    def to_dict(self) -> dict:
        return {
            "latitude": self.coordinates.latitude,
            "longitude": self.coordinates.longitude,
            "display_name": self.display_name,
        }
