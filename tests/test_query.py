"""Tests for bmlt_query.query module."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from bmlt_query.enums import Language, SortKey, VenueType, Weekday
from bmlt_query.models import Coordinates
from bmlt_query.query import MeetingQueryBuilder, QuickSearch

# 2024-06-03 is a Monday
MONDAY = date(2024, 6, 3)
SATURDAY = date(2024, 6, 8)


@pytest.fixture()
def fake_client() -> MagicMock:
    c = MagicMock()
    c.search_meetings.return_value = []
    c.search_meetings_by_address.return_value = []
    return c


class TestMeetingQueryBuilder:
    def test_chain_builds_params(self, fake_client):
        params = (
            MeetingQueryBuilder(fake_client)
            .virtual_only()
            .starting_after(17, 0)
            .ending_before(21, 0)
            .paginate(5, 1)
            .params
        )
        assert params == {
            "venue_types": 2,
            "StartsAfterH": 17,
            "StartsAfterM": 0,
            "StartsBeforeH": 21,
            "StartsBeforeM": 0,
            "page_size": 5,
        }
        assert "page_num" not in params

    def test_methods_return_same_instance(self, fake_client):
        builder = MeetingQueryBuilder(fake_client)
        assert builder.in_person_only() is builder
        assert builder.search_text("x") is builder
        assert builder.reset() is builder

    def test_page_num_sent_after_first_page(self, fake_client):
        params = MeetingQueryBuilder(fake_client).paginate(20, 3).params
        assert params == {"page_size": 20, "page_num": 3}

    def test_filters(self, fake_client):
        params = (
            MeetingQueryBuilder(fake_client)
            .on_weekdays(Weekday.MONDAY, 6)
            .with_venue_type(VenueType.HYBRID)
            .ending_after(20, 30)
            .search_text("speaker")
            .in_language(Language.SPANISH)
            .in_service_body(42)
            .sort_by(SortKey.TOWN)
            .with_param("recursive", 1)
            .params
        )
        assert params["weekdays"] == [2, 6]
        assert params["venue_types"] == 3
        assert params["EndsAfterH"] == 20
        assert params["EndsAfterM"] == 30
        assert params["SearchString"] == "speaker"
        assert params["lang_enum"] == "es"
        assert params["services"] == 42
        assert params["sort_keys"] == "town"
        assert params["recursive"] == 1

    @pytest.mark.parametrize(
        ("language", "expected"), [(Language.GERMAN, "de"), ("ru", "ru")]
    )
    def test_language_passes_raw_codes(self, fake_client, language, expected):
        params = MeetingQueryBuilder(fake_client).in_language(language).params
        assert params["lang_enum"] == expected

    def test_sort_by_raw_field_list(self, fake_client):
        params = (
            MeetingQueryBuilder(fake_client)
            .sort_by("location_municipality,start_time")
            .params
        )
        assert params["sort_keys"] == "location_municipality,start_time"

    def test_no_weekdays_leaves_params_untouched(self, fake_client):
        assert MeetingQueryBuilder(fake_client).on_weekdays().params == {}

    def test_formats_accumulate(self, fake_client):
        params = (
            MeetingQueryBuilder(fake_client).with_format(3).with_formats(17, 4).params
        )
        assert params["formats"] == [3, 17, 4]

    def test_time_values_not_range_checked(self, fake_client):
        params = MeetingQueryBuilder(fake_client).starting_after(25, 75).params
        assert params["StartsAfterH"] == 25
        assert params["StartsAfterM"] == 75

    def test_near_coordinates_not_validated(self, fake_client):
        builder = MeetingQueryBuilder(fake_client)
        builder.near_coordinates(Coordinates(95.0, 0.0), 500)
        assert builder.params["lat_val"] == 95.0
        assert builder.params["geo_width"] == 500

    def test_near_coordinates_km(self, fake_client):
        params = (
            MeetingQueryBuilder(fake_client)
            .near_coordinates_km(Coordinates(40.0, -73.0), 8)
            .params
        )
        assert params == {"lat_val": 40.0, "long_val": -73.0, "geo_width_km": 8}

    def test_params_is_a_copy(self, fake_client):
        builder = MeetingQueryBuilder(fake_client).with_format(1)
        snapshot = builder.params
        snapshot["formats"].append(99)
        snapshot["extra"] = True
        assert builder.params == {"formats": [1]}

    def test_reset(self, fake_client):
        builder = MeetingQueryBuilder(fake_client).virtual_only().paginate(5)
        assert builder.reset().params == {}

    def test_execute(self, fake_client):
        MeetingQueryBuilder(fake_client).virtual_only().execute()
        fake_client.search_meetings.assert_called_once_with({"venue_types": 2})

    def test_execute_near_address(self, fake_client):
        MeetingQueryBuilder(fake_client).virtual_only().execute_near_address(
            "Times Square", 3.0
        )
        fake_client.search_meetings_by_address.assert_called_once_with(
            "Times Square",
            3.0,
            sort_by_distance=True,
            search_params={"venue_types": 2, "sort_results_by_distance": True},
        )

    def test_execute_near_address_unsorted(self, fake_client):
        MeetingQueryBuilder(fake_client).execute_near_address(
            "Times Square", 3.0, sort_by_distance=False
        )
        fake_client.search_meetings_by_address.assert_called_once_with(
            "Times Square", 3.0, sort_by_distance=False, search_params={}
        )

    def test_execute_near_address_km(self, fake_client):
        MeetingQueryBuilder(fake_client).execute_near_address_km("Berlin", 10.0)
        fake_client.search_meetings_by_address.assert_called_once_with(
            "Berlin",
            0,
            radius_km=10.0,
            sort_by_distance=True,
            search_params={"sort_results_by_distance": True},
        )


class TestQuickSearch:
    def test_today_uses_clock(self, fake_client):
        qs = QuickSearch(fake_client, today=lambda: MONDAY)
        assert qs.today().params == {"weekdays": [Weekday.MONDAY]}

    def test_today_sunday(self, fake_client):
        qs = QuickSearch(fake_client, today=lambda: date(2024, 6, 9))
        assert qs.today().params["weekdays"] == [1]

    def test_tomorrow_wraps_to_sunday(self, fake_client):
        qs = QuickSearch(fake_client, today=lambda: SATURDAY)
        assert qs.tomorrow().params["weekdays"] == [1]

    def test_weekend_and_weekdays(self, fake_client):
        qs = QuickSearch(fake_client)
        assert qs.weekend().params["weekdays"] == [7, 1]
        assert qs.weekdays().params["weekdays"] == [2, 3, 4, 5, 6]

    def test_this_week_adds_nothing(self, fake_client):
        assert QuickSearch(fake_client).this_week().params == {}

    @pytest.mark.parametrize(
        ("preset", "expected"),
        [
            ("morning", {"StartsBeforeH": 12, "StartsBeforeM": 0}),
            ("early_morning", {"StartsBeforeH": 9, "StartsBeforeM": 0}),
            ("evening", {"StartsAfterH": 17, "StartsAfterM": 0}),
            ("late_night", {"StartsAfterH": 21, "StartsAfterM": 0}),
            (
                "afternoon",
                {
                    "StartsAfterH": 12,
                    "StartsAfterM": 0,
                    "StartsBeforeH": 17,
                    "StartsBeforeM": 0,
                },
            ),
            (
                "lunchtime",
                {
                    "StartsAfterH": 11,
                    "StartsAfterM": 0,
                    "StartsBeforeH": 14,
                    "StartsBeforeM": 0,
                },
            ),
        ],
    )
    def test_time_presets(self, fake_client, preset: str, expected: dict):
        qs = QuickSearch(fake_client)
        assert getattr(qs, preset)().params == expected

    @pytest.mark.parametrize(
        ("preset", "keyword"),
        [
            ("beginner_friendly", "beginner"),
            ("meditation", "meditation"),
            ("step_meetings", "step"),
            ("book_study", "book"),
            ("speaker_meetings", "speaker"),
            ("discussion_meetings", "discussion"),
            ("open_meetings", "open"),
            ("closed_meetings", "closed"),
        ],
    )
    def test_text_presets(self, fake_client, preset: str, keyword: str):
        qs = QuickSearch(fake_client)
        assert getattr(qs, preset)().params == {"SearchString": keyword}

    @pytest.mark.parametrize(
        ("preset", "venue"), [("virtual", 2), ("in_person", 1), ("hybrid", 3)]
    )
    def test_venue_presets(self, fake_client, preset: str, venue: int):
        assert getattr(QuickSearch(fake_client), preset)().params == {
            "venue_types": venue
        }

    def test_combinations(self, fake_client):
        qs = QuickSearch(fake_client, today=lambda: MONDAY)
        assert qs.tonight().params == {
            "weekdays": [2],
            "StartsAfterH": 17,
            "StartsAfterM": 0,
        }
        assert QuickSearch(fake_client, today=lambda: MONDAY).today_virtual().params == {
            "weekdays": [2],
            "venue_types": 2,
        }
        assert QuickSearch(fake_client).weekend_in_person().params == {
            "weekdays": [7, 1],
            "venue_types": 1,
        }
        assert QuickSearch(fake_client, today=lambda: MONDAY).this_morning().params == {
            "weekdays": [2],
            "StartsBeforeH": 12,
            "StartsBeforeM": 0,
        }

    def test_builder_methods_chain_back(self, fake_client):
        qs = QuickSearch(fake_client, today=lambda: MONDAY)
        chained = qs.today().virtual_only().paginate(10)
        assert chained is qs
        assert qs.evening() is qs
        assert qs.builder.params["page_size"] == 10

    def test_execute_delegates(self, fake_client):
        QuickSearch(fake_client).weekend().virtual_only().execute()
        fake_client.search_meetings.assert_called_once_with(
            {"weekdays": [7, 1], "venue_types": 2}
        )

    def test_unknown_attribute(self, fake_client):
        with pytest.raises(AttributeError):
            QuickSearch(fake_client).no_such_preset()

    def test_exposes_every_builder_method(self):
        builder_api = {
            name
            for name in vars(MeetingQueryBuilder)
            if not name.startswith("_")
        }
        assert builder_api <= set(vars(QuickSearch))

    def test_pass_through_keeps_raw_values(self, fake_client):
        qs = QuickSearch(fake_client)
        assert qs.in_language("ru").sort_by("town,start_time") is qs
        assert qs.params == {"lang_enum": "ru", "sort_keys": "town,start_time"}

    def test_reset_chains_back(self, fake_client):
        qs = QuickSearch(fake_client).weekend()
        assert qs.reset() is qs
        assert qs.params == {}

    def test_execute_near_address_delegates(self, fake_client):
        QuickSearch(fake_client).virtual().execute_near_address(
            "Times Square", 3.0, sort_by_distance=False
        )
        fake_client.search_meetings_by_address.assert_called_once_with(
            "Times Square", 3.0, sort_by_distance=False, search_params={"venue_types": 2}
        )
