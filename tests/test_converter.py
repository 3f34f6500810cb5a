import plistlib
import random
from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from src.timetable.converter import TimetableConverter
from src.timetable.errors import AuthenticationError
from src.timetable.models import TimetableOptions

from conftest import FakeSource, make_lesson

NOW = datetime(2024, 1, 8, 9, 30, tzinfo=timezone.utc)


def _convert(source, options, **kwargs):
    converter = TimetableConverter(source, rng=random.Random(0))
    xml = converter.generate_timetable(options, now=NOW, **kwargs)
    return plistlib.loads(xml.encode("utf-8"))


def test_single_lesson_week():
    source = FakeSource({"2024-01-08": [make_lesson()]})
    parsed = _convert(
        source, {"number_of_weeks": 1, "number_of_days_in_week": 5, "start_date": "2024-01-08"}
    )
    assert len(parsed["WeekEvents"]) == 1
    event = parsed["WeekEvents"][0]
    assert event["dayNum"] == 0
    assert event["weekNum"] == 0
    assert event["title"] == "Maths - 12"
    assert event["info"] == "Jones\nPeriod 3"
    assert parsed["Settings"]["NumberOfWeeks"] == 1
    assert list(parsed["Settings"]["ColorSettings"]) == ["Maths - 12"]


def test_default_start_and_days():
    source = FakeSource({"2024-01-16": [make_lesson(subject_name="Art")]})
    parsed = _convert(source, TimetableOptions(number_of_weeks=2), today=date(2024, 1, 12))
    assert len(source.requested) == 10
    event = parsed["WeekEvents"][0]
    assert (event["dayNum"], event["weekNum"]) == (1, 1)


def test_failed_days_do_not_abort():
    source = FakeSource(
        {"2024-01-08": [make_lesson()], "2024-01-10": [make_lesson(subject_name="Art")]},
        failing_dates={"2024-01-09"},
    )
    parsed = _convert(source, {"number_of_weeks": 1, "start_date": "2024-01-08"})
    assert [e["dayNum"] for e in parsed["WeekEvents"]] == [0, 2]


def test_custom_generators():
    source = FakeSource({"2024-01-08": [make_lesson(), make_lesson(subject_name="Art")]})
    parsed = _convert(
        source,
        {
            "number_of_weeks": 1,
            "start_date": "2024-01-08",
            "templates": {"title": "ignored"},
            "generators": {
                "lesson_body": lambda lesson: {"title": lesson.subject_name, "info": lesson.room_name},
                "colour": lambda title: (1, 0, 0) if title == "Maths" else (0, 0, 1),
            },
        },
    )
    assert [e["title"] for e in parsed["WeekEvents"]] == ["Maths", "Art"]
    assert parsed["Settings"]["ColorSettings"] == {
        "Maths": [1.0, 0.0, 0.0],
        "Art": [0.0, 0.0, 1.0],
    }


def test_weekend_flag_for_seven_day_weeks():
    parsed = _convert(
        FakeSource(), {"number_of_weeks": 1, "number_of_days_in_week": 7, "start_date": "2024-01-08"}
    )
    assert parsed["Settings"]["WeekendDaysAreActive"] is True


def test_authentication_failure_returns_nothing():
    source = FakeSource(login_error=AuthenticationError("rejected"))
    with pytest.raises(AuthenticationError, match="Check your login details"):
        _convert(source, {"number_of_weeks": 1})
    assert source.requested == []


@pytest.mark.parametrize(
    "options",
    [
        {"number_of_days_in_week": 5},
        {"number_of_weeks": 0},
        {"number_of_weeks": 1, "number_of_days_in_week": 0},
        {"number_of_weeks": 1, "start_date": "next tuesday"},
    ],
)
def test_invalid_options(options):
    with pytest.raises(ValidationError):
        _convert(FakeSource(), options)


def test_missing_days_in_week_defaults_to_five():
    options = TimetableOptions.model_validate(
        {"number_of_weeks": 1, "number_of_days_in_week": None, "templates": None}
    )
    assert options.number_of_days_in_week == 5
    assert options.templates.title == "%s - %r"
