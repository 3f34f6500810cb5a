from datetime import date

import pytest

from src.timetable.errors import DayFetchError
from src.timetable.models import Lesson


def make_lesson(**overrides):
    fields = {
        "teacher_name": "Jones",
        "lesson_name": "10A/Ma1",
        "subject_name": "Maths",
        "is_alternative_lesson": False,
        "period_name": "Period 3",
        "period_number": "3",
        "room_name": "12",
        "date": "2024-01-08",
        "start_time": "2024-01-08T09:00:00+00:00",
        "end_time": "2024-01-08T10:00:00+00:00",
        "key": 42,
        "note_abstract": "Bring calculator",
        "note": "Bring a scientific calculator",
        "pupil_note_abstract": "Revise",
        "pupil_note": "Revise chapter 4",
        "pupil_note_raw": "<p>Revise chapter 4</p>",
    }
    fields.update(overrides)
    return Lesson(**fields)


class FakeSource:
    """Lesson source serving canned lessons keyed by YYYY-MM-DD."""

    def __init__(self, lessons_by_date=None, failing_dates=(), login_error=None):
        self.lessons_by_date = lessons_by_date or {}
        self.failing_dates = set(failing_dates)
        self.login_error = login_error
        self.logged_in = False
        self.requested = []

    def login(self):
        if self.login_error is not None:
            raise self.login_error
        self.logged_in = True

    def get_lessons(self, date):
        assert self.logged_in
        self.requested.append(date)
        if date in self.failing_dates:
            raise DayFetchError(f"boom on {date}")
        return list(self.lessons_by_date.get(date, []))


@pytest.fixture
def lesson():
    return make_lesson()


@pytest.fixture
def monday():
    return date(2024, 1, 8)
