"""Timetable assembly - walks a date range and collects lessons day by day.

Weeks start on Monday. Each timetable week is realigned to a Monday, so
weeks never overlap however many days per week are requested.
"""

from datetime import date, timedelta

from src.timetable.client import LessonSource
from src.timetable.errors import AuthenticationError
from src.timetable.logging import get_logger
from src.timetable.models import DEFAULT_DAYS_IN_WEEK, Lesson, TimetableMatrix

log = get_logger(__name__)

LOGIN_FAILED_MESSAGE = "Failed to login to ClassCharts. Check your login details"


def start_of_week(day: date) -> date:
    """Return the Monday of the week containing `day`."""
    return day - timedelta(days=day.weekday())


def assemble_timetable(
    source: LessonSource,
    *,
    number_of_weeks: int,
    number_of_days_in_week: int = DEFAULT_DAYS_IN_WEEK,
    start_date: date | None = None,
    today: date | None = None,
) -> TimetableMatrix:
    """Fetch every day of the timetable cycle from the lesson source.

    Args:
        source: Lesson source to log in to and query.
        number_of_weeks: Weeks in the timetable cycle.
        number_of_days_in_week: School days per week. Values above 7 run past
            the end of a calendar week and are allowed.
        start_date: First day to fetch. Defaults to the Monday of this week.
        today: Reference date used when start_date is omitted.

    Returns:
        One list of lessons per day, week 0 day 0 first. Days that could not
        be fetched are empty lists.

    Raises:
        AuthenticationError: If login fails. No lessons are fetched.
        ValueError: If a count is not a positive integer.
    """
    for name, value in (
        ("number_of_weeks", number_of_weeks),
        ("number_of_days_in_week", number_of_days_in_week),
    ):
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValueError(f"{name} must be a positive integer, got {value!r}")

    try:
        source.login()
    except Exception as e:
        log.error("login_failed", error=str(e), type=type(e).__name__)
        raise AuthenticationError(LOGIN_FAILED_MESSAGE) from e

    if start_date is None:
        start_date = start_of_week(today or date.today())

    log.info(
        "timetable_assembly_started",
        start_date=start_date.isoformat(),
        weeks=number_of_weeks,
        days_per_week=number_of_days_in_week,
    )

    current = start_date
    days: TimetableMatrix = []
    failed = 0
    for _week in range(number_of_weeks):
        for _day in range(number_of_days_in_week):
            day_str = current.strftime("%Y-%m-%d")
            try:
                lessons: list[Lesson] = list(source.get_lessons(day_str))
            except Exception as e:
                # One bad day must not cost the whole timetable
                log.warning(
                    "day_fetch_failed",
                    date=day_str,
                    error=str(e),
                    type=type(e).__name__,
                )
                lessons = []
                failed += 1
            days.append(lessons)
            current += timedelta(days=1)
        current = start_of_week(current + timedelta(weeks=1))

    log.info(
        "timetable_assembly_finished",
        days=len(days),
        lessons=sum(len(day) for day in days),
        failed_days=failed,
    )
    return days
