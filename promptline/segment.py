"""
Segment - the atomic renderable unit of a prompt.
"""
from dataclasses import dataclass, replace
from typing import Optional

from rich.style import Style

from .style import render_ansi


@dataclass(frozen=True)
class Segment:
    """A named piece of text with an optional style.

    Attributes:
        name: Identifier used in diagnostics (e.g., "symbol", "output")
        value: The text to display
        style: Style applied when rendering, or None for plain text
    """
    name: str
    value: str = ""
    style: Optional[Style] = None

    def with_style(self, style: Optional[Style]) -> "Segment":
        """Return a copy of this segment with a different style."""
        return replace(self, style=style)

    def has_style(self) -> bool:
        return self.style is not None

    def ansi_string(self) -> str:
        """Render this segment to an ANSI-styled string."""
        return render_ansi(self.value, self.style)

    def __str__(self) -> str:
        return self.ansi_string()
