"""
Unit tests for row normalization and Main/Side deduplication.
"""

import unittest

from confswipe.normalize import map_event_type, normalize, parse_time_range, sanitize_location


def _row(**fields: str) -> dict:
    base = {"Event Name": "Keynote", "Date": "2025-04-28"}
    base.update(fields)
    return base


class TestFiltering(unittest.TestCase):
    def test_rows_without_title_or_date_are_skipped(self) -> None:
        rows = [
            {"Event Name": "", "Date": "2025-04-28"},
            {"Event Name": "No Date", "Date": "  "},
            {"Date": "2025-04-28"},
            _row(Time="9AM-10AM"),
        ]
        with self.assertLogs("confswipe.normalize", level="WARNING"):
            events = normalize(rows)
        self.assertEqual([e.title for e in events], ["Keynote"])

    def test_invalid_date_is_skipped(self) -> None:
        events = normalize([_row(Date="2025-02-30"), _row(**{"Event Name": "Ok"})])
        self.assertEqual([e.title for e in events], ["Ok"])
        self.assertEqual(events[0].id, 1)

    def test_lowercase_aliases(self) -> None:
        events = normalize([{"title": "Talk", "date": "2025-04-28", "startTime": "10:00", "endTime": "11:00"}])
        self.assertEqual(events[0].start_time, "10:00")
        self.assertEqual(events[0].end_time, "11:00")


class TestDefaults(unittest.TestCase):
    def test_defaults_for_missing_fields(self) -> None:
        ev = normalize([_row()])[0]
        self.assertEqual(ev.description, "No description provided")
        self.assertEqual(ev.location, "TBD")
        self.assertEqual(ev.type, "other")
        self.assertEqual(ev.start_time, "00:00")
        self.assertEqual(ev.end_time, "00:00")
        self.assertEqual(ev.speakers, ())
        self.assertIsNone(ev.additional_data)

    def test_date_is_normalized(self) -> None:
        ev = normalize([_row(Date="4/28/2025")])[0]
        self.assertEqual(ev.date, "2025-04-28")

    def test_speakers_are_split(self) -> None:
        ev = normalize([_row(Speakers="Jane Doe; John Smith")])[0]
        self.assertEqual(ev.speakers, ("Jane Doe", "John Smith"))


class TestTimes(unittest.TestCase):
    def test_explicit_start_and_end_win(self) -> None:
        self.assertEqual(parse_time_range("6:00 PM", "7PM", "1-2"), ("18:00", "19:00"))

    def test_combined_range_hyphen(self) -> None:
        self.assertEqual(parse_time_range("", "", "9:00 AM - 10:30 AM"), ("09:00", "10:30"))

    def test_combined_range_dashes(self) -> None:
        self.assertEqual(parse_time_range("", "", "6PM – 9PM"), ("18:00", "21:00"))
        self.assertEqual(parse_time_range("", "", "6PM—9PM"), ("18:00", "21:00"))

    def test_only_start_falls_back_to_range(self) -> None:
        self.assertEqual(parse_time_range("9:00", "", "10-11"), ("10:00", "11:00"))

    def test_no_times_default_to_midnight(self) -> None:
        self.assertEqual(parse_time_range("", "", ""), ("00:00", "00:00"))
        self.assertEqual(parse_time_range("", "", "all day"), ("00:00", "00:00"))

    def test_unparseable_time_becomes_default(self) -> None:
        ev = normalize([_row(StartTime="soon", EndTime="later")])[0]
        self.assertEqual((ev.start_time, ev.end_time), ("00:00", "00:00"))


class TestLocationAndType(unittest.TestCase):
    def test_time_like_location_rejected(self) -> None:
        self.assertEqual(sanitize_location("9:00 AM"), "TBD")
        self.assertEqual(sanitize_location("7PM"), "TBD")
        self.assertEqual(sanitize_location("Starts 10:30"), "TBD")

    def test_real_location_kept(self) -> None:
        self.assertEqual(sanitize_location("Main Stage"), "Main Stage")
        self.assertEqual(sanitize_location("AMPHITHEATER"), "AMPHITHEATER")
        self.assertEqual(sanitize_location(""), "TBD")

    def test_type_mapping(self) -> None:
        self.assertEqual(map_event_type("Main"), "main")
        self.assertEqual(map_event_type("SIDE"), "networking")
        self.assertEqual(map_event_type("workshop"), "other")
        self.assertEqual(map_event_type(""), "other")


class TestMerge(unittest.TestCase):
    def test_main_and_side_rows_become_one_event(self) -> None:
        rows = [
            _row(Type="Main", Description="The real description", Location="Main Stage"),
            _row(Type="Side", Action="RSVP", **{"Action Link": "https://example.com/rsvp"}),
        ]
        events = normalize(rows)
        self.assertEqual(len(events), 1)
        ev = events[0]
        self.assertEqual(ev.type, "main")
        self.assertEqual(ev.description, "The real description")
        self.assertEqual(ev.location, "Main Stage")
        self.assertEqual(ev.additional_data["action_link"], "https://example.com/rsvp")
        self.assertEqual(ev.additional_data["action"], "RSVP")

    def test_side_first_then_main_promotes(self) -> None:
        rows = [
            _row(Type="Side", Location="Lobby", Action="RSVP", **{"Action Link": "https://side"}),
            _row(Type="Main", Description="Main text", Location="Hall A", **{"Action Link": "https://main"}),
        ]
        ev = normalize(rows)[0]
        self.assertEqual(ev.type, "main")
        self.assertEqual(ev.description, "Main text")
        self.assertEqual(ev.location, "Hall A")
        # side-channel fields: first writer wins
        self.assertEqual(ev.additional_data["action_link"], "https://side")
        self.assertEqual(ev.additional_data["action"], "RSVP")

    def test_side_never_overwrites_main_description_or_location(self) -> None:
        rows = [
            _row(Type="Main", Description="Main text", Location="Hall A", Action="Register"),
            _row(Type="Side", Description="Side text", Location="Lobby", Action="RSVP"),
        ]
        ev = normalize(rows)[0]
        self.assertEqual(ev.description, "Main text")
        self.assertEqual(ev.location, "Hall A")
        self.assertEqual(ev.additional_data["action"], "Register")

    def test_side_without_description_uses_title(self) -> None:
        ev = normalize([_row(Type="Side")])[0]
        self.assertEqual(ev.description, "Keynote")
        self.assertEqual(ev.type, "networking")

    def test_side_placeholder_does_not_block_later_description(self) -> None:
        rows = [
            _row(**{"Event Name": "Mixer"}, Type="Side"),
            _row(**{"Event Name": "Mixer"}, Type="Side", Description="Drinks on the roof"),
        ]
        ev = normalize(rows)[0]
        self.assertEqual(ev.description, "Drinks on the roof")

    def test_side_then_untagged_row_keeps_real_description(self) -> None:
        rows = [_row(Type="Side"), _row(Description="Full details")]
        ev = normalize(rows)[0]
        self.assertEqual(ev.description, "Full details")
        self.assertEqual(ev.type, "networking")

    def test_same_variant_rows_fill_gaps(self) -> None:
        rows = [
            _row(Type="Main", Description="First"),
            _row(Type="Main", Description="Second", Location="Hall B", Time="10AM-11AM"),
        ]
        ev = normalize(rows)[0]
        self.assertEqual(ev.description, "First")
        self.assertEqual(ev.location, "Hall B")
        self.assertEqual((ev.start_time, ev.end_time), ("10:00", "11:00"))

    def test_same_title_on_other_date_is_separate(self) -> None:
        events = normalize([_row(), _row(Date="2025-04-29")])
        self.assertEqual([e.id for e in events], [1, 2])

    def test_ids_follow_first_seen_key_order(self) -> None:
        rows = [
            _row(**{"Event Name": "B"}, Date="2025-04-29"),
            _row(**{"Event Name": "A"}),
            _row(**{"Event Name": "B"}, Date="2025-04-29", Type="Side"),
            _row(**{"Event Name": "C"}, Date="2025-04-27"),
        ]
        events = normalize(rows)
        self.assertEqual([(e.id, e.title) for e in events], [(1, "B"), (2, "A"), (3, "C")])


if __name__ == "__main__":
    unittest.main()
