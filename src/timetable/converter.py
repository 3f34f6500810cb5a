"""ClassCharts to ClassTimetable conversion.

TimetableConverter ties the pieces together: fetch the timetable cycle,
render each lesson, colour it and export the result as plist XML. The
returned text is meant to be saved as a [name].timetable file.

Basic example:
    converter = TimetableConverter.from_credentials("CODE", "01/01/2010")
    xml = converter.generate_timetable({"number_of_weeks": 2})
    Path("Timetable.timetable").write_text(xml, encoding="utf-8")
"""

import random
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from src.timetable.assembler import assemble_timetable
from src.timetable.client import ClassChartsClient, LessonSource
from src.timetable.colours import ColourTable
from src.timetable.config import ConverterConfig, get_config
from src.timetable.logging import get_logger
from src.timetable.models import TimetableOptions
from src.timetable.plist import project_timetable
from src.timetable.templates import select_strategy

log = get_logger(__name__)


class TimetableConverter:
    """Converts a lesson source's timetable into ClassTimetable XML."""

    def __init__(self, source: LessonSource, rng: random.Random | None = None) -> None:
        """Initialize the converter.

        Args:
            source: Lesson source, normally a ClassChartsClient.
            rng: Random source for default lesson colours.
        """
        self.source = source
        self.rng = rng

    @classmethod
    def from_credentials(
        cls,
        code: str,
        date_of_birth: str | None = None,
        config: ConverterConfig | None = None,
    ) -> "TimetableConverter":
        """Build a converter backed by a ClassCharts student login."""
        config = config or get_config()
        client = ClassChartsClient(
            code,
            date_of_birth,
            base_url=config.classcharts_url,
            timeout=config.request_timeout,
        )
        return cls(client)

    def generate_timetable(
        self,
        options: TimetableOptions | Mapping[str, Any],
        *,
        today: date | None = None,
        now: datetime | None = None,
    ) -> str:
        """Fetch the timetable and export it as ClassTimetable plist XML.

        Args:
            options: TimetableOptions or a mapping validated into one.
            today: Reference date for the default start of week.
            now: Generation time written into the settings.

        Returns:
            Plist XML text.

        Raises:
            AuthenticationError: If logging in to the lesson source fails.
            pydantic.ValidationError: If the options are invalid.
        """
        if not isinstance(options, TimetableOptions):
            options = TimetableOptions.model_validate(options)

        matrix = assemble_timetable(
            self.source,
            number_of_weeks=options.number_of_weeks,
            number_of_days_in_week=options.number_of_days_in_week,
            start_date=options.start_date,
            today=today,
        )
        colours = ColourTable(generator=options.generators.colour, rng=self.rng)
        xml = project_timetable(
            matrix,
            select_strategy(options),
            colours,
            options.number_of_weeks,
            options.number_of_days_in_week,
            now=now,
        )
        log.info("timetable_generated", bytes=len(xml))
        return xml
