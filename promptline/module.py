"""
Module - a named unit of prompt content.

A module is built by a builtin detector or by the custom module executor
during one resolution pass and handed straight to the evaluator.
"""
from typing import Any, Optional

from rich.style import Style

from .segment import Segment
from .style import wrap_colorseq_for_shell


class Module:
    """A prompt module composed of a prefix, content segments and a suffix.

    Example:
        module = Module("python", "The current Python version")
        module.create_segment("version", "v3.12.1", parse_style("yellow"))
        print(module)
    """

    def __init__(
        self,
        name: str,
        description: str,
        config: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Initialize a module.

        Args:
            name: Module identifier (e.g., "git_branch", "custom.docker")
            description: Human readable description shown by `explain`
            config: The raw configuration table the module was built from
        """
        self.name = name
        self.description = description
        self.config = config
        self.prefix = Segment(f"{name}_prefix")
        self.suffix = Segment(f"{name}_suffix")
        self.segments: list[Segment] = []

    def set_prefix(self, value: str, style: Optional[Style] = None) -> None:
        self.prefix = Segment(f"{self.name}_prefix", value, style)

    def set_suffix(self, value: str, style: Optional[Style] = None) -> None:
        self.suffix = Segment(f"{self.name}_suffix", value, style)

    def create_segment(
        self,
        name: str,
        value: str,
        style: Optional[Style] = None,
    ) -> Segment:
        """Create a segment and append it to this module."""
        segment = Segment(name, value, style)
        self.segments.append(segment)
        return segment

    def set_segments(self, segments: list[Segment]) -> None:
        self.segments = list(segments)

    def get_segments(self) -> list[str]:
        """Get the text values of the content segments."""
        return [segment.value for segment in self.segments]

    def is_empty(self) -> bool:
        """Whether the module has no visible content."""
        return all(not segment.value for segment in self.segments)

    def all_segments(self) -> list[Segment]:
        """Get the content segments surrounded by a non-empty prefix/suffix."""
        segments = []
        if self.prefix.value:
            segments.append(self.prefix)
        segments.extend(self.segments)
        if self.suffix.value:
            segments.append(self.suffix)
        return segments

    def ansi_strings(self) -> list[str]:
        return [segment.ansi_string() for segment in self.all_segments()]

    def ansi_strings_for_shell(self, shell: str) -> list[str]:
        """Render each segment, wrapping escape sequences for the shell."""
        return [wrap_colorseq_for_shell(s, shell) for s in self.ansi_strings()]

    def __str__(self) -> str:
        return "".join(self.ansi_strings())

    def __repr__(self) -> str:
        return f"Module(name={self.name!r}, segments={self.get_segments()!r})"
