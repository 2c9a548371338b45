"""
Style handling for promptline.

Translates prompt style strings (``"bold fg:green bg:#1a1a1a"``) into rich
styles and renders styled text to ANSI escape sequences for a given shell.
"""
import logging
import re
from typing import Optional

from rich.color import ColorSystem
from rich.errors import StyleSyntaxError
from rich.style import Style

logger = logging.getLogger(__name__)

# Matches SGR and other CSI escape sequences
ANSI_ESCAPE_PATTERN = re.compile(r'\x1b\[[0-9;]*[A-Za-z]')

# Prompt-config attribute names that differ from rich's vocabulary
_ATTRIBUTE_ALIASES = {
    "dimmed": "dim",
    "inverted": "reverse",
    "hidden": "conceal",
    "strikethrough": "strike",
}


def parse_style(style_string: Optional[str]) -> Optional[Style]:
    """Parse a prompt style string into a rich Style.

    Supports color names, ``#rrggbb`` and ``0-255`` colors, ``fg:``/``bg:``
    prefixes, text attributes and ``none``.

    Args:
        style_string: The style string from configuration or a template.

    Returns:
        The parsed Style, or None for an empty, ``none`` or invalid string.
        Invalid strings are logged rather than raised.
    """
    if not style_string or not style_string.strip():
        return None

    tokens = []
    for token in style_string.lower().split():
        if token == "none":
            return None

        if token.startswith("fg:"):
            tokens.append(_translate_color(token[3:]))
        elif token.startswith("bg:"):
            tokens.append(f"on {_translate_color(token[3:])}")
        else:
            token = _ATTRIBUTE_ALIASES.get(token, token)
            tokens.append(_translate_color(token))

    try:
        return Style.parse(" ".join(tokens))
    except StyleSyntaxError as e:
        logger.warning(f"Could not parse style '{style_string}': {e}")
        return None


def _translate_color(token: str) -> str:
    """Translate a bare 0-255 color number into rich's ``color(n)`` form."""
    if token.isdigit():
        return f"color({token})"
    return token


def render_ansi(text: str, style: Optional[Style]) -> str:
    """Render text with a style as ANSI escape sequences."""
    if style is None or not text:
        return text
    return style.render(text, color_system=ColorSystem.TRUECOLOR)


def wrap_colorseq_for_shell(ansi: str, shell: str) -> str:
    """Wrap ANSI escape sequences so the shell does not count them as width.

    Bash needs non-printing sequences between ``\\[`` and ``\\]``, zsh between
    ``%{`` and ``%}``. Other shells handle them natively.

    Args:
        ansi: Text containing ANSI escape sequences.
        shell: The shell name (e.g., "bash", "zsh").

    Returns:
        The text with each escape sequence wrapped for the shell.
    """
    if shell == "bash":
        begin, end = "\\[", "\\]"
    elif shell == "zsh":
        begin, end = "%{", "%}"
    else:
        return ansi

    return ANSI_ESCAPE_PATTERN.sub(lambda m: f"{begin}{m.group(0)}{end}", ansi)


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from text."""
    return ANSI_ESCAPE_PATTERN.sub("", text)
