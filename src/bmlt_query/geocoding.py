"""Address lookup through OpenStreetMap Nominatim."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import requests

from bmlt_query._http import _HttpSession
from bmlt_query._version import DEFAULT_USER_AGENT
from bmlt_query.exceptions import BmltQueryError
from bmlt_query.models import Coordinates, GeocodeResult

NOMINATIM_BASE_URL = "https://nominatim.openstreetmap.org"

logger = logging.getLogger(__name__)


class GeocodingService:
    """
    Forward and reverse geocoding against Nominatim.

    Optional biasing: *country_code* (e.g. 'us'), and *viewbox* given as
    ``[min_lon, min_lat, max_lon, max_lat]``. With *bounded* set, results
    are restricted to the viewbox instead of merely preferred.

    *retry_count* is kept for callers that implement their own retries;
    the service itself makes exactly one request per call.
    """

    def __init__(
        self,
        timeout: int = 10,
        retry_count: int = 3,
        user_agent: str = DEFAULT_USER_AGENT,
        country_code: Optional[str] = None,
        viewbox: Optional[Sequence[float]] = None,
        bounded: bool = False,
    ):
        if viewbox is not None and len(viewbox) != 4:
            raise BmltQueryError.validation_error(
                "Viewbox must be [min_lon, min_lat, max_lon, max_lat]"
            )
        self.timeout = timeout
        self.retry_count = retry_count
        self.user_agent = user_agent
        self.country_code = country_code
        self.viewbox = tuple(viewbox) if viewbox is not None else None
        self.bounded = bounded
        self._http = _HttpSession("Nominatim")

    # ── Public API ────────────────────────────────────────────────

    def geocode(self, address: str) -> GeocodeResult:
        """
        Resolve *address* to coordinates using the best Nominatim match.

        Raises BmltQueryError: VALIDATION_ERROR for a blank address,
        GEOCODING_ERROR when nothing usable comes back.
        """
        if not address or not address.strip():
            raise BmltQueryError.validation_error("Address cannot be empty")

        data = self._get("/search", self._search_params(address.strip()))

        if not isinstance(data, list) or not data:
            logger.warning("No geocoding results for %r", address)
            raise BmltQueryError.geocoding_error(
                f"No results found for address: {address}"
            )

        result = data[0]
        if not isinstance(result, dict) or not all(
            result.get(key) is not None for key in ("lat", "lon", "display_name")
        ):
            raise BmltQueryError.geocoding_error(
                "Invalid geocoding response format"
            )

        try:
            coordinates = Coordinates(
                latitude=float(result["lat"]),
                longitude=float(result["lon"]),
            )
        except (TypeError, ValueError) as exc:
            raise BmltQueryError.geocoding_error(
                "Invalid geocoding response format", exc
            ) from exc

        return GeocodeResult(
            coordinates=coordinates,
            display_name=str(result["display_name"]),
            raw_data=result,
        )

    def reverse_geocode(self, coordinates: Coordinates) -> GeocodeResult:
        """
        Resolve *coordinates* to a display name.

        The returned result carries the input coordinates, not the ones
        Nominatim echoes back.
        """
        params = {
            "lat": coordinates.latitude,
            "lon": coordinates.longitude,
            "format": "json",
            "addressdetails": 1,
        }
        data = self._get("/reverse", params)

        if not isinstance(data, dict) or data.get("display_name") is None:
            logger.warning(
                "No reverse geocoding result for %s, %s",
                coordinates.latitude,
                coordinates.longitude,
            )
            raise BmltQueryError.geocoding_error(
                "No results found for coordinates: "
                f"{coordinates.latitude}, {coordinates.longitude}"
            )

        return GeocodeResult(
            coordinates=coordinates,
            display_name=str(data["display_name"]),
            raw_data=data,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> GeocodingService:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # ── Private helpers ───────────────────────────────────────────

    def _search_params(self, address: str) -> dict[str, Any]:
        params: dict[str, Any] = {
            "q": address,
            "format": "json",
            "limit": 1,
            "addressdetails": 1,
        }
        if self.country_code:
            params["countrycodes"] = self.country_code
        if self.viewbox:
            min_lon, min_lat, max_lon, max_lat = self.viewbox
            # Nominatim wants left,top,right,bottom
            params["viewbox"] = f"{min_lon},{max_lat},{max_lon},{min_lat}"
            if self.bounded:
                params["bounded"] = "1"
        return params

    def _get(self, path: str, params: dict[str, Any]) -> Any:
        """GET a Nominatim path and return the decoded JSON body."""
        url = f"{NOMINATIM_BASE_URL}{path}"
        logger.debug("Nominatim request %s %s", path, params)
        try:
            resp = self._http.get(
                url,
                params=params,
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "application/json",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise BmltQueryError.geocoding_error(
                f"Geocoding request failed: {exc}", exc
            ) from exc

        if resp.status_code != 200:
            raise BmltQueryError.geocoding_error(
                f"Geocoding request failed: HTTP {resp.status_code}"
            )

        try:
            return resp.json()
        except ValueError as exc:
            raise BmltQueryError.geocoding_error(
                f"Geocoding response was not valid JSON: {exc}", exc
            ) from exc
