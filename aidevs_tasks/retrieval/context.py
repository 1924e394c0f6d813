"""Render retrieved point attributes into grounding text for a prompt."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from aidevs_tasks.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ContextLine:
    """One sentence of the rendered context.

    The line is emitted when at least one of ``keys`` is present in the
    attributes; absent keys are dropped from the joined value.
    """

    keys: tuple[str, ...]
    template: str
    separator: str = " "

    def render(self, attributes: Mapping[str, object]) -> str | None:
        values = [str(attributes[key]) for key in self.keys if attributes.get(key) is not None]
        if not values:
            return None
        return self.template.format(value=self.separator.join(values))


def render(attributes: Mapping[str, object], lines: Sequence[ContextLine]) -> str:
    """Render ``attributes`` following the declared order of ``lines``."""
    rendered = [text for text in (line.render(attributes) for line in lines) if text is not None]
    context = "\n".join(rendered)
    logger.debug("Context:\n%s", context)
    return context


PEOPLE_CONTEXT: tuple[ContextLine, ...] = (
    ContextLine(("name", "surname"), "Nazywam się {value}"),
    ContextLine(("age",), "Mam {value} lat"),
    ContextLine(("about",), "O mnie: {value}"),
    ContextLine(("favourite_bomba_character",), "Moja ulubiona postać z Kapitana Bomby: {value}"),
    ContextLine(("favourite_series",), "Mój ulubiony serial: {value}"),
    ContextLine(("favourite_movie",), "Mój ulubiony film: {value}"),
    ContextLine(("favourite_color",), "Mój ulubiony kolor: {value}"),
)


__all__ = ["ContextLine", "render", "PEOPLE_CONTEXT"]
