"""Lesson text templates.

A template is plain text with %-tokens that are replaced by lesson fields,
e.g. "%s - %r" renders as "Maths - 12". Tokens:

    %t      teacher name            %d      date
    %n      lesson name             %st     start time
    %s      subject name            %et     end time
    %a      alternative lesson      %k      key
    %pn     period name             %na     note abstract
    %pnum   period number           %no     note
    %r      room name               %pna    pupil note abstract
                                    %pnote  pupil note
                                    %pnr    pupil note raw

Matching is done in one pass, always taking the longest token at each
position, so "%pnum" is never read as "%pn" followed by "um". There is no
escape syntax: every token occurrence is replaced.
"""

import re
from collections.abc import Callable, Mapping
from typing import Any

from src.timetable.models import Lesson, RenderedLesson, TemplatePair, TimetableOptions


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _key(value: Any) -> str:
    return "" if value is None else str(value)


TOKENS: dict[str, Callable[[Lesson], str]] = {
    "%t": lambda lesson: lesson.teacher_name,
    "%n": lambda lesson: lesson.lesson_name,
    "%s": lambda lesson: lesson.subject_name,
    "%a": lambda lesson: _flag(lesson.is_alternative_lesson),
    "%pn": lambda lesson: lesson.period_name,
    "%pnum": lambda lesson: lesson.period_number,
    "%r": lambda lesson: lesson.room_name,
    "%d": lambda lesson: lesson.date,
    "%st": lambda lesson: lesson.start_time,
    "%et": lambda lesson: lesson.end_time,
    "%k": lambda lesson: _key(lesson.key),
    "%na": lambda lesson: lesson.note_abstract,
    "%no": lambda lesson: lesson.note,
    "%pna": lambda lesson: lesson.pupil_note_abstract,
    "%pnote": lambda lesson: lesson.pupil_note,
    "%pnr": lambda lesson: lesson.pupil_note_raw,
}

# Longest alternatives first: re tries them left to right
_TOKEN_RE = re.compile(
    "|".join(re.escape(token) for token in sorted(TOKENS, key=len, reverse=True))
)


def expand_template(template: str, lesson: Lesson) -> str:
    """Replace every token in `template` with the matching lesson field."""

    def _substitute(match: re.Match[str]) -> str:
        return TOKENS[match.group(0)](lesson)

    return _TOKEN_RE.sub(_substitute, template)


def render_lesson(lesson: Lesson, templates: TemplatePair | None = None) -> RenderedLesson:
    """Render the title and info text of a lesson.

    Args:
        lesson: Lesson to describe.
        templates: Title/info templates. Defaults to "%s - %r" and "%t\\n%pn".

    Returns:
        RenderedLesson with both templates expanded.
    """
    templates = templates or TemplatePair()
    return RenderedLesson(
        title=expand_template(templates.title, lesson),
        info=expand_template(templates.info, lesson),
    )


class TemplateStrategy:
    """Renders lessons from a title/info template pair."""

    def __init__(self, templates: TemplatePair | None = None) -> None:
        self.templates = templates or TemplatePair()

    def render(self, lesson: Lesson) -> RenderedLesson:
        return render_lesson(lesson, self.templates)


class CustomFunctionStrategy:
    """Renders lessons with a caller-supplied function."""

    def __init__(self, function: Callable[[Lesson], Any]) -> None:
        self.function = function

    def render(self, lesson: Lesson) -> RenderedLesson:
        result = self.function(lesson)
        if isinstance(result, RenderedLesson):
            return result
        if isinstance(result, Mapping):
            return RenderedLesson.model_validate(result)
        return RenderedLesson(title=result.title, info=result.info)


LessonTextStrategy = TemplateStrategy | CustomFunctionStrategy


def select_strategy(options: TimetableOptions) -> LessonTextStrategy:
    """Pick how lesson text is produced for a conversion run.

    A custom lesson_body generator takes priority over the templates.
    """
    if options.generators.lesson_body is not None:
        return CustomFunctionStrategy(options.generators.lesson_body)
    return TemplateStrategy(options.templates)
