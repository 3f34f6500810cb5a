"""ClassTimetable plist export.

Builds the property list that ClassTimetable imports from a .timetable file:

    Settings        ColorSettings, NumberOfWeeks, SelectedWeek,
                    SelectedWeekUpdateDate, WeekendDaysAreActive
    WeekEvents      one dict per lesson (dayNum, weekNum, title, time,
                    endTime, info)
    TaskCategories  always empty
    TaskEvents      always empty

ClassTimetable only accepts <real> values for time and endTime. plistlib
writes Python floats as <real> and ints as <integer>, so both fields are
always built as floats, including whole values such as midnight.
"""

import plistlib
from datetime import datetime, time, timezone
from typing import Any

from src.timetable.colours import ColourTable
from src.timetable.logging import get_logger
from src.timetable.models import Lesson, TimetableMatrix
from src.timetable.templates import LessonTextStrategy

log = get_logger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def _parse_clock(value: str) -> time:
    try:
        return datetime.fromisoformat(value).timetz()
    except ValueError:
        return time.fromisoformat(value)


def time_of_day(value: str) -> float:
    """Convert a lesson timestamp to the fraction of its day that has passed.

    The wall-clock time in the timestamp's own offset is used, so
    "2024-01-08T12:00:00+01:00" gives 0.5.

    Args:
        value: ISO 8601 date-time (or bare time) from the lesson source.

    Returns:
        Float in [0, 1). Unparseable values give 0.0 and a warning.
    """
    try:
        clock = _parse_clock(value)
    except (TypeError, ValueError):
        log.warning("unparseable_lesson_time", value=value)
        return 0.0
    seconds = (
        clock.hour * 3600 + clock.minute * 60 + clock.second + clock.microsecond / 1e6
    )
    return float(seconds) / SECONDS_PER_DAY


def update_timestamp(now: datetime | None = None) -> str:
    """ISO 8601 UTC timestamp with milliseconds, e.g. 2024-01-08T09:00:00.000Z."""
    now = now or datetime.now(timezone.utc)
    return (
        now.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def week_event(
    lesson: Lesson, title: str, info: str, day_index: int, week_index: int
) -> dict[str, Any]:
    return {
        "dayNum": day_index,
        "weekNum": week_index,
        "title": title,
        "time": time_of_day(lesson.start_time),
        "endTime": time_of_day(lesson.end_time),
        "info": info,
    }


def build_document(
    matrix: TimetableMatrix,
    strategy: LessonTextStrategy,
    colours: ColourTable,
    number_of_weeks: int,
    number_of_days_in_week: int,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Fold assembled lessons into the ClassTimetable document structure.

    Args:
        matrix: One list of lessons per day, as returned by assemble_timetable().
        strategy: Produces the title and info text of each lesson.
        colours: Colour table for this run. New titles are added to it.
        number_of_weeks: Weeks in the timetable cycle.
        number_of_days_in_week: Days per week; day/week indices wrap at this.
        now: Generation time written to SelectedWeekUpdateDate.

    Returns:
        Nested dict ready for plistlib.
    """
    events: list[dict[str, Any]] = []
    day_index = 0
    week_index = 0
    for day in matrix:
        for lesson in day:
            text = strategy.render(lesson)
            colours.colour_for(text.title)
            events.append(
                week_event(lesson, text.title, text.info, day_index, week_index)
            )
        day_index += 1
        if day_index >= number_of_days_in_week:
            week_index += 1
            day_index = 0

    return {
        "Settings": {
            "ColorSettings": colours.as_plist(),
            "NumberOfWeeks": number_of_weeks,
            "SelectedWeek": 0,
            "SelectedWeekUpdateDate": update_timestamp(now),
            "WeekendDaysAreActive": number_of_days_in_week == 7,
        },
        "WeekEvents": events,
        "TaskCategories": [],
        "TaskEvents": [],
    }


def dumps_document(document: dict[str, Any]) -> str:
    """Serialize a document to plist XML text.

    Keys keep their insertion order so colour settings stay in first-seen
    order. plistlib errors are not caught.
    """
    return plistlib.dumps(document, fmt=plistlib.FMT_XML, sort_keys=False).decode(
        "utf-8"
    )


def project_timetable(
    matrix: TimetableMatrix,
    strategy: LessonTextStrategy,
    colours: ColourTable,
    number_of_weeks: int,
    number_of_days_in_week: int,
    now: datetime | None = None,
) -> str:
    """Build the ClassTimetable document and return it as plist XML."""
    document = build_document(
        matrix, strategy, colours, number_of_weeks, number_of_days_in_week, now
    )
    log.info(
        "timetable_projected",
        events=len(document["WeekEvents"]),
        colours=len(colours),
    )
    return dumps_document(document)
