"""Unit tests for end-time inference and slot splitting."""

import pytest

from timetable_extractor.extraction.heuristics import (
    infer_duration_minutes,
    infer_end_time,
    split_timeblock,
)
from timetable_extractor.models import Weekday


class TestInferEndTime:
    """Test suite for keyword-based duration inference."""

    def test_pack_up_gets_five_minutes(self) -> None:
        assert infer_end_time("Pack Up", "15:10") == "15:15"

    def test_jobs_and_read_aloud_gets_thirty_minutes(self) -> None:
        assert infer_end_time("Jobs & Read Aloud", "15:00") == "15:30"

    @pytest.mark.parametrize(
        ("name", "minutes"),
        [
            ("Dismissal", 5),
            ("pack-up and home", 5),
            ("Home time", 5),
            ("Guided Reading", 30),
            ("Class jobs", 30),
            ("Fitness", 30),
            ("Lunch", 30),
            ("Afternoon Recess", 30),
            ("Maths", 30),
            ("", 30),
            (None, 30),
        ],
    )
    def test_keyword_rules(self, name, minutes: int) -> None:
        assert infer_duration_minutes(name) == minutes

    def test_first_matching_rule_wins(self) -> None:
        assert infer_duration_minutes("Pack up, then read") == 5

    def test_rolls_over_midnight(self) -> None:
        assert infer_end_time("Night club", "23:45") == "00:15"


class TestSplitTimeblock:
    """Test suite for multi-subject slot splitting."""

    def test_two_subjects_share_slot(self) -> None:
        blocks = split_timeblock("Tuesday", ["RWI", "Play (Observation)"], "09:00", "10:15")

        assert [(b.event_name, b.start_time, b.end_time) for b in blocks] == [
            ("RWI", "09:00", "09:38"),
            ("Play (Observation)", "09:38", "10:15"),
        ]
        assert all(b.day is Weekday.TUESDAY for b in blocks)
        assert blocks[0].notes == "Split from 09:00-10:15 slot (2 subjects)"

    def test_single_subject_is_not_annotated(self) -> None:
        (block,) = split_timeblock(Weekday.MONDAY, ["Maths"], "09:15", "10:45")

        assert block.start_time == "09:15"
        assert block.end_time == "10:45"
        assert block.notes is None

    def test_blank_names_are_ignored(self) -> None:
        blocks = split_timeblock("Friday", ["Spelling", "  ", ""], "09:00", "09:30")

        assert len(blocks) == 1

    def test_requires_a_name(self) -> None:
        with pytest.raises(ValueError):
            split_timeblock("Friday", [" "], "09:00", "09:30")
