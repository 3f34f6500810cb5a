"""Per-title lesson colours.

Every distinct lesson title gets one colour for the whole conversion run.
Titles keep the order in which they were first seen, which is also the
order they are written to the ClassTimetable settings.
"""

import random
from collections.abc import Callable, Mapping
from typing import Any

from src.timetable.models import Colour

ColourGenerator = Callable[[str], Any]


def random_colour(rng: random.Random | None = None) -> Colour:
    """Pick a colour with each channel drawn from 0-255 and scaled to 0-1."""
    rng = rng or random.Random()
    return Colour(
        r=rng.randint(0, 255) / 255,
        g=rng.randint(0, 255) / 255,
        b=rng.randint(0, 255) / 255,
    )


def coerce_colour(value: Any) -> Colour:
    """Accept a Colour, an r/g/b mapping or an (r, g, b) sequence."""
    if isinstance(value, Colour):
        return value
    if isinstance(value, Mapping):
        return Colour.model_validate(value)
    r, g, b = value
    return Colour(r=r, g=g, b=b)


class ColourTable:
    """Title to colour mapping for one conversion run."""

    def __init__(
        self,
        generator: ColourGenerator | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize an empty table.

        Args:
            generator: Custom colour function called with the lesson title.
                Its result is used as-is.
            rng: Random source for the default generator.
        """
        self.generator = generator
        self.rng = rng or random.Random()
        self._colours: dict[str, Colour] = {}

    def colour_for(self, title: str) -> Colour:
        """Return the colour for `title`, assigning one on first use."""
        colour = self._colours.get(title)
        if colour is None:
            if self.generator is not None:
                colour = coerce_colour(self.generator(title))
            else:
                colour = random_colour(self.rng)
            self._colours[title] = colour
        return colour

    def __contains__(self, title: object) -> bool:
        return title in self._colours

    def __len__(self) -> int:
        return len(self._colours)

    def __bool__(self) -> bool:
        # An empty table is still a table
        return True

    def titles(self) -> list[str]:
        return list(self._colours)

    def as_plist(self) -> dict[str, list[float]]:
        """Colour settings in first-seen order, as ClassTimetable expects them."""
        return {title: colour.as_list() for title, colour in self._colours.items()}
