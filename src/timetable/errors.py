"""Error hierarchy for timetable conversion.

AuthenticationError aborts a conversion; DayFetchError only costs the day
it was raised for, which the assembler then treats as empty.

Example usage:
    try:
        lessons = client.get_lessons("2024-01-08")
    except DayFetchError:
        lessons = []
"""


class TimetableError(Exception):
    """Base exception for all timetable conversion errors."""

    pass


class AuthenticationError(TimetableError):
    """Login to the lesson source failed - check the student code and date of birth.

    No partial timetable is produced when this is raised.
    """

    pass


class DayFetchError(TimetableError):
    """Lessons for a single day could not be fetched.

    The assembler recovers from this by treating the day as empty.
    """

    pass
