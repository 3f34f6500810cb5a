"""ClassCharts to ClassTimetable converter.

Fetches a student timetable from ClassCharts and exports it as a
ClassTimetable .timetable plist document.
"""

from src.timetable.assembler import assemble_timetable
from src.timetable.client import ClassChartsClient, LessonSource
from src.timetable.colours import ColourTable
from src.timetable.converter import TimetableConverter
from src.timetable.models import Lesson, TemplatePair, TimetableOptions
from src.timetable.templates import render_lesson

__all__ = [
    "TimetableConverter",
    "ClassChartsClient",
    "LessonSource",
    "ColourTable",
    "Lesson",
    "TemplatePair",
    "TimetableOptions",
    "assemble_timetable",
    "render_lesson",
]
