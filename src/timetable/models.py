"""Pydantic models for timetable data.

All data structures use Pydantic v2 for validation, serialization, and type safety.
"""

from collections.abc import Callable
from datetime import date
from typing import Any

from pydantic import BaseModel, Field, PositiveInt, ValidationInfo, field_validator

DEFAULT_TITLE_TEMPLATE = "%s - %r"
DEFAULT_INFO_TEMPLATE = "%t\n%pn"
DEFAULT_DAYS_IN_WEEK = 5


class Lesson(BaseModel):
    """A single lesson from the ClassCharts student timetable.

    Field names follow the JSON returned by /apiv2student/timetable. Times are
    kept exactly as delivered (ISO 8601 with offset) so templates can echo them.
    """

    teacher_name: str = ""
    lesson_name: str = ""
    subject_name: str = ""
    is_alternative_lesson: bool = False
    period_name: str = ""
    period_number: str = ""  # "3", kept as text like the API
    room_name: str = ""
    date: str = ""  # "2024-01-08"
    start_time: str = ""  # "2024-01-08T09:00:00+00:00"
    end_time: str = ""
    key: int | str | None = None
    note_abstract: str = ""
    note: str = ""
    pupil_note_abstract: str = ""
    pupil_note: str = ""
    pupil_note_raw: str = ""

    model_config = {
        "frozen": True,
        "extra": "ignore",
        "coerce_numbers_to_str": True,
    }

    @field_validator(
        "teacher_name",
        "lesson_name",
        "subject_name",
        "period_name",
        "period_number",
        "room_name",
        "date",
        "start_time",
        "end_time",
        "note_abstract",
        "note",
        "pupil_note_abstract",
        "pupil_note",
        "pupil_note_raw",
        mode="before",
    )
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        # ClassCharts sends null for unset notes and rooms
        return "" if value is None else value

    @field_validator("is_alternative_lesson", mode="before")
    @classmethod
    def _null_to_false(cls, value: Any) -> Any:
        return False if value is None else value


TimetableMatrix = list[list[Lesson]]


class TemplatePair(BaseModel):
    """Title and info templates applied to every lesson."""

    title: str = DEFAULT_TITLE_TEMPLATE
    info: str = DEFAULT_INFO_TEMPLATE

    model_config = {"frozen": True}

    @field_validator("title", "info", mode="before")
    @classmethod
    def _default_when_missing(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


class RenderedLesson(BaseModel):
    """Display text for one lesson."""

    title: str
    info: str


class Colour(BaseModel):
    """RGB colour with each channel normally between 0 and 1."""

    r: float
    g: float
    b: float

    model_config = {"frozen": True}

    def as_list(self) -> list[float]:
        """Return the channels in the order ClassTimetable stores them."""
        return [float(self.r), float(self.g), float(self.b)]


class Generators(BaseModel):
    """Optional callables overriding the default colour and text generation.

    colour receives the rendered lesson title and returns a Colour, a mapping
    with r/g/b keys or an (r, g, b) sequence. lesson_body receives a Lesson and
    returns a RenderedLesson or a mapping with title/info keys; when set, the
    templates are ignored.
    """

    colour: Callable[[str], Any] | None = None
    lesson_body: Callable[[Lesson], Any] | None = None


class TimetableOptions(BaseModel):
    """Options for a single timetable conversion."""

    start_date: date | None = Field(
        default=None,
        description="First day of the timetable. Defaults to the start of the current week",
    )
    number_of_weeks: PositiveInt = Field(
        description="Number of weeks in the timetable cycle",
    )
    number_of_days_in_week: PositiveInt = Field(
        default=DEFAULT_DAYS_IN_WEEK,
        description="Number of school days in one timetable week",
    )
    templates: TemplatePair = Field(default_factory=TemplatePair)
    generators: Generators = Field(default_factory=Generators)

    @field_validator("number_of_days_in_week", mode="before")
    @classmethod
    def _default_days(cls, value: Any) -> Any:
        return DEFAULT_DAYS_IN_WEEK if value is None else value

    @field_validator("templates", "generators", mode="before")
    @classmethod
    def _empty_when_missing(cls, value: Any) -> Any:
        return {} if value is None else value
