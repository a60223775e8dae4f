"""BmltClient: the main entry point for the library."""

from __future__ import annotations

import json
import logging
import re
from datetime import date
from typing import Any, Callable, Mapping, Optional, TypeVar

import requests

from bmlt_query import urls
from bmlt_query._http import _HttpSession
from bmlt_query._version import DEFAULT_USER_AGENT
from bmlt_query.enums import BmltDataFormat, BmltEndpoint
from bmlt_query.exceptions import BmltQueryError
from bmlt_query.geocoding import GeocodingService
from bmlt_query.models import (
    Coordinates,
    Format,
    GeocodeResult,
    Meeting,
    ServerInfo,
    ServiceBody,
)

_DEFAULT_TIMEOUT = 30
_GEOCODER_TIMEOUT = 10
_GEOCODING_DISABLED = (
    "Geocoding is not enabled. Initialize client with enable_geocoding=True"
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BmltClient:
    """
    Client for a single BMLT root server.

    The root server URL is validated and normalised on construction, so
    'https://bmlt.example.org' and 'https://bmlt.example.org/main_server/'
    address the same server. Every network operation performs exactly one
    blocking GET; nothing is retried.
    """

    def __init__(
        self,
        root_server_url: str,
        default_format: BmltDataFormat = BmltDataFormat.JSON,
        timeout: int = _DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        enable_geocoding: bool = True,
        geocoding_service: Optional[GeocodingService] = None,
    ):
        self.root_server_url = root_server_url
        self.default_format = default_format
        self.timeout = timeout
        self.user_agent = user_agent
        self._enable_geocoding = enable_geocoding
        self._geocoder = geocoding_service if enable_geocoding else None
        self._owns_geocoder = False
        self._http = _HttpSession("BMLT")

    # ── Configuration ─────────────────────────────────────────────

    @property
    def root_server_url(self) -> str:
        return self._root_server_url

    @root_server_url.setter
    def root_server_url(self, url: str) -> None:
        urls.validate_root_server_url(url)
        self._root_server_url = urls.normalize_root_server_url(url)

    @property
    def user_agent(self) -> str:
        return self._user_agent

    @user_agent.setter
    def user_agent(self, value: str) -> None:
        if not isinstance(value, str) or not value.strip():
            raise BmltQueryError.validation_error(
                "User agent must be a non-empty string"
            )
        self._user_agent = value.strip()

    @property
    def timeout(self) -> int:
        return self._timeout

    @timeout.setter
    def timeout(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise BmltQueryError.validation_error(
                "Timeout must be a positive integer"
            )
        self._timeout = value

    @property
    def default_format(self) -> BmltDataFormat:
        return self._default_format

    @default_format.setter
    def default_format(self, fmt: BmltDataFormat | str) -> None:
        self._default_format = _coerce_format(fmt)

    @property
    def geocoding_enabled(self) -> bool:
        return self._enable_geocoding

    # ── Meeting search ────────────────────────────────────────────

    def search_meetings(
        self, params: Optional[Mapping[str, Any]] = None
    ) -> list[Meeting]:
        """
        Search meetings with raw GetSearchResults parameters.

        A 'format' entry in *params* overrides the default data format for
        this call and is not sent to the server.
        """
        query = dict(params or {})
        fmt = query.pop("format", None)
        data = self.make_request(BmltEndpoint.GET_SEARCH_RESULTS, query, fmt)
        return self._map_records(data, Meeting.from_dict)

    def search_meetings_by_coordinates(
        self,
        coordinates: Coordinates,
        radius_miles: float,
        radius_km: Optional[float] = None,
        search_params: Optional[Mapping[str, Any]] = None,
    ) -> list[Meeting]:
        """
        Search meetings around *coordinates*, nearest first.

        When *radius_km* is given it is sent instead of *radius_miles* and
        distances come back in kilometres.
        """
        urls.validate_coordinates(coordinates)
        urls.validate_radius(radius_miles)

        params = dict(search_params or {})
        params["lat_val"] = coordinates.latitude
        params["long_val"] = coordinates.longitude
        self._apply_radius(params, radius_miles, radius_km)
        params["sort_results_by_distance"] = True

        return self.search_meetings(params)

    def search_meetings_by_address(
        self,
        address: str,
        radius_miles: float,
        radius_km: Optional[float] = None,
        sort_by_distance: bool = True,
        search_params: Optional[Mapping[str, Any]] = None,
    ) -> list[Meeting]:
        """
        Geocode *address* and search meetings around it.

        Distances in the results are in the unit of the radius that was
        sent: kilometres if *radius_km* is given, miles otherwise.
        """
        geocoder = self._require_geocoder()

        params = dict(search_params or {})
        self._apply_radius(params, radius_miles, radius_km)

        location = geocoder.geocode(address)
        params["lat_val"] = location.coordinates.latitude
        params["long_val"] = location.coordinates.longitude
        params["sort_results_by_distance"] = sort_by_distance

        return self.search_meetings(params)

    # ── Server metadata ───────────────────────────────────────────

    def get_server_info(self) -> ServerInfo:
        data = self.make_request(BmltEndpoint.GET_SERVER_INFO)

        # The server usually wraps the info object in a one-element list
        if isinstance(data, list) and data:
            data = data[0]
        if not isinstance(data, dict):
            raise BmltQueryError.response_error(
                "Unexpected GetServerInfo response shape"
            )
        return self._build(ServerInfo.from_dict, data)

    def get_formats(
        self, params: Optional[Mapping[str, Any]] = None
    ) -> list[Format]:
        data = self.make_request(BmltEndpoint.GET_FORMATS, params)
        return self._map_records(data, Format.from_dict)

    def get_service_bodies(
        self, params: Optional[Mapping[str, Any]] = None
    ) -> list[ServiceBody]:
        data = self.make_request(BmltEndpoint.GET_SERVICE_BODIES, params)
        return self._map_records(data, ServiceBody.from_dict)

    def get_field_keys(self) -> list:
        """Return the raw list of ``{key, description}`` mappings."""
        data = self.make_request(BmltEndpoint.GET_FIELD_KEYS)
        return data if isinstance(data, list) else []

    def get_field_values(self, meeting_key: str) -> list:
        """Return the raw distinct values of *meeting_key* across meetings."""
        data = self.make_request(
            BmltEndpoint.GET_FIELD_VALUES, {"meeting_key": meeting_key}
        )
        return data if isinstance(data, list) else []

    def get_changes(
        self,
        start_date: str | date,
        end_date: Optional[str | date] = None,
        service_body_id: Optional[int] = None,
    ) -> list:
        """Return raw change records between *start_date* and *end_date*."""
        params: dict[str, Any] = {"start_date": _as_date_str(start_date)}
        if end_date is not None:
            params["end_date"] = _as_date_str(end_date)
        if service_body_id is not None:
            params["sb_id"] = service_body_id

        data = self.make_request(BmltEndpoint.GET_CHANGES, params)
        return data if isinstance(data, list) else []

    def get_coverage_area(self) -> dict:
        """Return the raw bounding box mapping of the server's meetings."""
        data = self.make_request(BmltEndpoint.GET_COVERAGE_AREA)
        if isinstance(data, list) and data:
            data = data[0]
        return data if isinstance(data, dict) else {}

    # ── Geocoding ─────────────────────────────────────────────────

    def geocode_address(self, address: str) -> GeocodeResult:
        return self._require_geocoder().geocode(address)

    def reverse_geocode(self, coordinates: Coordinates) -> GeocodeResult:
        return self._require_geocoder().reverse_geocode(coordinates)

    # ── Transport ─────────────────────────────────────────────────

    def make_request(
        self,
        endpoint: BmltEndpoint,
        parameters: Optional[Mapping[str, Any]] = None,
        fmt: Optional[BmltDataFormat] = None,
    ) -> Any:
        """
        Perform one semantic API call and return the decoded body.

        CSV bodies are returned as text; JSON, JSONP and TSML bodies are
        decoded. Raises BmltQueryError on validation, transport, status or
        parse failures.
        """
        endpoint = BmltEndpoint(endpoint)
        fmt = _coerce_format(fmt) if fmt is not None else self._default_format
        parameters = dict(parameters or {})

        url = urls.build_bmlt_url(
            self._root_server_url, endpoint, fmt, parameters
        )
        logger.debug("BMLT request %s: %s", endpoint.value, url)

        try:
            resp = self._http.get(
                url,
                headers={
                    "User-Agent": self._user_agent,
                    "Accept": "application/json",
                },
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise BmltQueryError.network_error(
                f"Request failed: {exc}", exc
            ) from exc

        if resp.status_code != 200:
            logger.warning(
                "BMLT %s returned HTTP %s", endpoint.value, resp.status_code
            )
            raise BmltQueryError.response_error(
                f"HTTP {resp.status_code}: {resp.reason}", resp.status_code
            )

        return self._parse_response(resp.text, fmt, parameters)

    def close(self) -> None:
        """Release the HTTP session (and the geocoder's, if created here)."""
        self._http.close()
        if self._owns_geocoder and self._geocoder is not None:
            self._geocoder.close()

    def __enter__(self) -> BmltClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # ── Private helpers ───────────────────────────────────────────

    def _require_geocoder(self) -> GeocodingService:
        """Return the geocoder, creating the default one on first use."""
        if not self._enable_geocoding:
            raise BmltQueryError.validation_error(_GEOCODING_DISABLED)
        if self._geocoder is None:
            self._geocoder = GeocodingService(
                timeout=_GEOCODER_TIMEOUT, user_agent=self._user_agent
            )
            self._owns_geocoder = True
        return self._geocoder

    @staticmethod
    def _apply_radius(
        params: dict[str, Any],
        radius_miles: float,
        radius_km: Optional[float],
    ) -> None:
        # Kilometres win when both are supplied
        if radius_km is not None:
            urls.validate_radius(radius_km)
            params["geo_width_km"] = radius_km
        else:
            urls.validate_radius(radius_miles)
            params["geo_width"] = radius_miles

    @staticmethod
    def _parse_response(
        text: str, fmt: BmltDataFormat, parameters: Mapping[str, Any]
    ) -> Any:
        if fmt is BmltDataFormat.CSV:
            return text

        if fmt is BmltDataFormat.JSONP:
            callback = str(parameters.get("callback") or "callback")
            match = re.match(
                rf"^{re.escape(callback)}\s*\(\s*(.*?)\s*\)\s*;?\s*$",
                text,
                re.DOTALL,
            )
            if match is None:
                raise BmltQueryError.response_error(
                    "Failed to parse response: Invalid JSONP format"
                )
            text = match.group(1)
        elif fmt not in (BmltDataFormat.JSON, BmltDataFormat.TSML):
            raise BmltQueryError.validation_error(
                f"Unsupported data format: {fmt}"
            )

        try:
            return json.loads(text)
        except ValueError as exc:
            logger.warning("Could not decode %s response: %s", fmt.value, exc)
            raise BmltQueryError.response_error(
                f"Failed to parse response: {exc}", cause=exc
            ) from exc

    @classmethod
    def _map_records(
        cls, data: Any, factory: Callable[[Mapping[str, Any]], T]
    ) -> list[T]:
        if not isinstance(data, list):
            return []
        return [cls._build(factory, item) for item in data]

    @staticmethod
    def _build(factory: Callable[[Mapping[str, Any]], T], item: Any) -> T:
        if not isinstance(item, Mapping):
            raise BmltQueryError.response_error(
                f"Expected a record mapping, got {type(item).__name__}"
            )
        try:
            return factory(item)
        except (TypeError, ValueError) as exc:
            raise BmltQueryError.response_error(
                f"Malformed record in response: {exc}", cause=exc
            ) from exc


def _as_date_str(value: str | date) -> str:
    return value.isoformat() if isinstance(value, date) else str(value)


def _coerce_format(fmt: BmltDataFormat | str) -> BmltDataFormat:
    try:
        return BmltDataFormat(fmt)
    except ValueError:
        raise BmltQueryError.validation_error(
            f"Unsupported data format: {fmt}"
        ) from None
