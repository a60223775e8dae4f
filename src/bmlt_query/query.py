"""Fluent builders for GetSearchResults queries.

Builders are mutable: every method updates the builder's parameter map and
returns the same instance, so a chain shares one set of parameters.

    meetings = (
        MeetingQueryBuilder(client)
        .virtual_only()
        .starting_after(17, 0)
        .on_weekdays(Weekday.MONDAY, Weekday.FRIDAY)
        .paginate(10)
        .execute()
    )
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING, Any, Callable

from bmlt_query.enums import Language, SortKey, VenueType, Weekday
from bmlt_query.models import Coordinates, Meeting

if TYPE_CHECKING:
    from bmlt_query.client import BmltClient


class MeetingQueryBuilder:
    """Accumulates GetSearchResults parameters for one BmltClient."""

    def __init__(self, client: BmltClient):
        self._client = client
        self._params: dict[str, Any] = {}

    # ── Day and venue filters ─────────────────────────────────────

    def on_weekdays(self, *weekdays: Weekday | int) -> MeetingQueryBuilder:
        """Restrict to the given days (1=Sunday ... 7=Saturday)."""
        values = [int(day) for day in weekdays]
        if values:
            self._params["weekdays"] = values
        return self

    def with_venue_type(self, venue_type: VenueType | int) -> MeetingQueryBuilder:
        self._params["venue_types"] = int(venue_type)
        return self

    def virtual_only(self) -> MeetingQueryBuilder:
        return self.with_venue_type(VenueType.VIRTUAL)

    def in_person_only(self) -> MeetingQueryBuilder:
        return self.with_venue_type(VenueType.IN_PERSON)

    def hybrid_only(self) -> MeetingQueryBuilder:
        return self.with_venue_type(VenueType.HYBRID)

    # ── Time filters ──────────────────────────────────────────────
    # Hours and minutes go to the server unchecked.

    def starting_after(self, hour: int, minute: int = 0) -> MeetingQueryBuilder:
        self._params["StartsAfterH"] = hour
        self._params["StartsAfterM"] = minute
        return self

    def starting_before(self, hour: int, minute: int = 0) -> MeetingQueryBuilder:
        self._params["StartsBeforeH"] = hour
        self._params["StartsBeforeM"] = minute
        return self

    def ending_before(self, hour: int, minute: int = 0) -> MeetingQueryBuilder:
        # Maps onto StartsBeforeH/M, same keys as starting_before.
        return self.starting_before(hour, minute)

    def ending_after(self, hour: int, minute: int = 0) -> MeetingQueryBuilder:
        self._params["EndsAfterH"] = hour
        self._params["EndsAfterM"] = minute
        return self

    # ── Content filters ───────────────────────────────────────────

    def search_text(self, text: str) -> MeetingQueryBuilder:
        self._params["SearchString"] = text
        return self

    def in_language(self, language: Language | str) -> MeetingQueryBuilder:
        self._params["lang_enum"] = (
            language.value if isinstance(language, Language) else language
        )
        return self

    def in_service_body(self, service_body_id: int) -> MeetingQueryBuilder:
        self._params["services"] = service_body_id
        return self

    def with_format(self, format_id: int) -> MeetingQueryBuilder:
        """Add one format shared ID; repeated calls accumulate."""
        self._params.setdefault("formats", []).append(format_id)
        return self

    def with_formats(self, *format_ids: int) -> MeetingQueryBuilder:
        for format_id in format_ids:
            self.with_format(format_id)
        return self

    # ── Paging and sorting ────────────────────────────────────────

    def paginate(self, page_size: int, page_num: int = 1) -> MeetingQueryBuilder:
        """Set the page size; page 1 is the server default and is omitted."""
        self._params["page_size"] = page_size
        if page_num > 1:
            self._params["page_num"] = page_num
        return self

    def sort_by_distance(self, sort: bool = True) -> MeetingQueryBuilder:
        self._params["sort_results_by_distance"] = sort
        return self

    def sort_by(self, sort_key: SortKey | str) -> MeetingQueryBuilder:
        """Sort by a SortKey or a raw comma-separated field list."""
        self._params["sort_keys"] = (
            sort_key.value if isinstance(sort_key, SortKey) else sort_key
        )
        return self

    # ── Proximity ─────────────────────────────────────────────────
    # Unlike BmltClient.search_meetings_by_coordinates these do not
    # range-check; the server decides what to do with odd values.

    def near_coordinates(
        self, coordinates: Coordinates, radius_miles: float
    ) -> MeetingQueryBuilder:
        self._params["lat_val"] = coordinates.latitude
        self._params["long_val"] = coordinates.longitude
        self._params["geo_width"] = radius_miles
        return self

    def near_coordinates_km(
        self, coordinates: Coordinates, radius_km: float
    ) -> MeetingQueryBuilder:
        self._params["lat_val"] = coordinates.latitude
        self._params["long_val"] = coordinates.longitude
        self._params["geo_width_km"] = radius_km
        return self

    def with_param(self, key: str, value: Any) -> MeetingQueryBuilder:
        """Set any raw GetSearchResults parameter."""
        self._params[key] = value
        return self

    # ── Execution ─────────────────────────────────────────────────

    def execute(self) -> list[Meeting]:
        return self._client.search_meetings(self._params)

    def execute_near_address(
        self, address: str, radius_miles: float, sort_by_distance: bool = True
    ) -> list[Meeting]:
        """Geocode *address* and run the query within *radius_miles* of it."""
        if sort_by_distance:
            self.sort_by_distance()
        return self._client.search_meetings_by_address(
            address,
            radius_miles,
            sort_by_distance=sort_by_distance,
            search_params=self._params,
        )

    def execute_near_address_km(
        self, address: str, radius_km: float, sort_by_distance: bool = True
    ) -> list[Meeting]:
        """Like execute_near_address, with distances in kilometres."""
        if sort_by_distance:
            self.sort_by_distance()
        return self._client.search_meetings_by_address(
            address,
            0,
            radius_km=radius_km,
            sort_by_distance=sort_by_distance,
            search_params=self._params,
        )

    @property
    def params(self) -> dict[str, Any]:
        """A copy of the current parameters."""
        return {
            key: list(value) if isinstance(value, list) else value
            for key, value in self._params.items()
        }

    def reset(self) -> MeetingQueryBuilder:
        self._params = {}
        return self


class QuickSearch:
    """
    Named presets for common searches, layered on a MeetingQueryBuilder.

    Every builder method is also available here and chains back to the
    QuickSearch, so presets and primitives mix freely:

        QuickSearch(client).tonight().in_person_only().execute()

    *today* supplies the current date; it defaults to the system clock.
    """

    def __init__(
        self,
        client: BmltClient,
        today: Callable[[], date] = date.today,
    ):
        self._builder = MeetingQueryBuilder(client)
        self._today = today

    @property
    def builder(self) -> MeetingQueryBuilder:
        return self._builder

    @property
    def params(self) -> dict[str, Any]:
        return self._builder.params

    # ── Builder pass-through ──────────────────────────────────────
    # Each call updates the wrapped builder and returns this QuickSearch.

    def on_weekdays(self, *weekdays: Weekday | int) -> QuickSearch:
        self._builder.on_weekdays(*weekdays)
        return self

    def with_venue_type(self, venue_type: VenueType | int) -> QuickSearch:
        self._builder.with_venue_type(venue_type)
        return self

    def virtual_only(self) -> QuickSearch:
        self._builder.virtual_only()
        return self

    def in_person_only(self) -> QuickSearch:
        self._builder.in_person_only()
        return self

    def hybrid_only(self) -> QuickSearch:
        self._builder.hybrid_only()
        return self

    def starting_after(self, hour: int, minute: int = 0) -> QuickSearch:
        self._builder.starting_after(hour, minute)
        return self

    def starting_before(self, hour: int, minute: int = 0) -> QuickSearch:
        self._builder.starting_before(hour, minute)
        return self

    def ending_before(self, hour: int, minute: int = 0) -> QuickSearch:
        self._builder.ending_before(hour, minute)
        return self

    def ending_after(self, hour: int, minute: int = 0) -> QuickSearch:
        self._builder.ending_after(hour, minute)
        return self

    def search_text(self, text: str) -> QuickSearch:
        self._builder.search_text(text)
        return self

    def in_language(self, language: Language | str) -> QuickSearch:
        self._builder.in_language(language)
        return self

    def in_service_body(self, service_body_id: int) -> QuickSearch:
        self._builder.in_service_body(service_body_id)
        return self

    def with_format(self, format_id: int) -> QuickSearch:
        self._builder.with_format(format_id)
        return self

    def with_formats(self, *format_ids: int) -> QuickSearch:
        self._builder.with_formats(*format_ids)
        return self

    def paginate(self, page_size: int, page_num: int = 1) -> QuickSearch:
        self._builder.paginate(page_size, page_num)
        return self

    def sort_by_distance(self, sort: bool = True) -> QuickSearch:
        self._builder.sort_by_distance(sort)
        return self

    def sort_by(self, sort_key: SortKey | str) -> QuickSearch:
        self._builder.sort_by(sort_key)
        return self

    def near_coordinates(
        self, coordinates: Coordinates, radius_miles: float
    ) -> QuickSearch:
        self._builder.near_coordinates(coordinates, radius_miles)
        return self

    def near_coordinates_km(
        self, coordinates: Coordinates, radius_km: float
    ) -> QuickSearch:
        self._builder.near_coordinates_km(coordinates, radius_km)
        return self

    def with_param(self, key: str, value: Any) -> QuickSearch:
        self._builder.with_param(key, value)
        return self

    def reset(self) -> QuickSearch:
        self._builder.reset()
        return self

    def execute(self) -> list[Meeting]:
        return self._builder.execute()

    def execute_near_address(
        self, address: str, radius_miles: float, sort_by_distance: bool = True
    ) -> list[Meeting]:
        return self._builder.execute_near_address(
            address, radius_miles, sort_by_distance
        )

    def execute_near_address_km(
        self, address: str, radius_km: float, sort_by_distance: bool = True
    ) -> list[Meeting]:
        return self._builder.execute_near_address_km(
            address, radius_km, sort_by_distance
        )

    # ── Days ──────────────────────────────────────────────────────

    def today(self) -> QuickSearch:
        self._builder.on_weekdays(Weekday.from_date(self._today()))
        return self

    def tomorrow(self) -> QuickSearch:
        tomorrow = self._today() + timedelta(days=1)
        self._builder.on_weekdays(Weekday.from_date(tomorrow))
        return self

    def this_week(self) -> QuickSearch:
        """Every day of the week, i.e. no weekday filter."""
        return self

    def weekend(self) -> QuickSearch:
        self._builder.on_weekdays(Weekday.SATURDAY, Weekday.SUNDAY)
        return self

    def weekdays(self) -> QuickSearch:
        self._builder.on_weekdays(
            Weekday.MONDAY,
            Weekday.TUESDAY,
            Weekday.WEDNESDAY,
            Weekday.THURSDAY,
            Weekday.FRIDAY,
        )
        return self

    # ── Times of day ──────────────────────────────────────────────

    def early_morning(self) -> QuickSearch:
        self._builder.starting_before(9, 0)
        return self

    def morning(self) -> QuickSearch:
        self._builder.starting_before(12, 0)
        return self

    def lunchtime(self) -> QuickSearch:
        self._builder.starting_after(11, 0).starting_before(14, 0)
        return self

    def afternoon(self) -> QuickSearch:
        self._builder.starting_after(12, 0).starting_before(17, 0)
        return self

    def evening(self) -> QuickSearch:
        self._builder.starting_after(17, 0)
        return self

    def late_night(self) -> QuickSearch:
        self._builder.starting_after(21, 0)
        return self

    # ── Venues ────────────────────────────────────────────────────

    def virtual(self) -> QuickSearch:
        self._builder.virtual_only()
        return self

    def in_person(self) -> QuickSearch:
        self._builder.in_person_only()
        return self

    def hybrid(self) -> QuickSearch:
        self._builder.hybrid_only()
        return self

    # ── Text presets ──────────────────────────────────────────────

    def _text(self, keyword: str) -> QuickSearch:
        self._builder.search_text(keyword)
        return self

    def beginner_friendly(self) -> QuickSearch:
        return self._text("beginner")

    def meditation(self) -> QuickSearch:
        return self._text("meditation")

    def step_meetings(self) -> QuickSearch:
        return self._text("step")

    def book_study(self) -> QuickSearch:
        return self._text("book")

    def speaker_meetings(self) -> QuickSearch:
        return self._text("speaker")

    def discussion_meetings(self) -> QuickSearch:
        return self._text("discussion")

    def open_meetings(self) -> QuickSearch:
        return self._text("open")

    def closed_meetings(self) -> QuickSearch:
        return self._text("closed")

    # ── Combinations ──────────────────────────────────────────────

    def today_virtual(self) -> QuickSearch:
        return self.today().virtual()

    def weekend_in_person(self) -> QuickSearch:
        return self.weekend().in_person()

    def tonight(self) -> QuickSearch:
        return self.today().evening()

    def this_morning(self) -> QuickSearch:
        return self.today().morning()
