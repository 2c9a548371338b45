"""
One-time messages shown above the prompt.

A message is shown until it has been displayed once. Which messages were
already seen is kept in a small state object that the caller loads before
rendering and saves afterwards.
"""
import hashlib
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .constants import CACHE_DIR
from .segment import Segment
from .style import parse_style

logger = logging.getLogger(__name__)

DEPRECATED_USE_FORMAT = (
    "[promptline] The `prompt_order` and `add_newline` options are deprecated "
    "and ignored. Use `format` instead, for example \"format\": \"\\n$all\"."
)

MESSAGE_STYLE = "bold yellow"


def message_hash(message: str) -> str:
    return hashlib.sha256(message.encode("utf-8")).hexdigest()[:16]


@dataclass
class MessageState:
    """Messages queued for this render and the hashes already shown.

    Attributes:
        viewed: Hashes of messages shown in earlier renders
        pending: Messages queued during this render, in order
    """
    viewed: set[str] = field(default_factory=set)
    pending: list[str] = field(default_factory=list)

    def add(self, message: str) -> None:
        if message not in self.pending:
            self.pending.append(message)

    def unseen(self) -> list[str]:
        return [m for m in self.pending if message_hash(m) not in self.viewed]

    def get_segments(self) -> list[Segment]:
        """Segments for every unseen message, one line each."""
        style = parse_style(MESSAGE_STYLE)
        return [
            Segment("message", f"{message}\n", style)
            for message in self.unseen()
        ]

    def mark_viewed(self) -> None:
        """Record every pending message as shown."""
        self.viewed.update(message_hash(m) for m in self.pending)
        self.pending.clear()


class MessageStore:
    """
    Loads and saves MessageState as JSON.
    """

    STATE_FILENAME: str = "viewed_messages.json"

    def __init__(self, cache_dir: Optional[Path] = None):
        """
        Initialize the store.

        Args:
            cache_dir: Directory for the state file. Defaults to CACHE_DIR.
        """
        self._cache_dir = cache_dir or CACHE_DIR
        self._state_file = self._cache_dir / self.STATE_FILENAME

    @property
    def state_file(self) -> Path:
        return self._state_file

    def load(self) -> MessageState:
        """Load the state; a missing or corrupted file gives an empty state."""
        if not self._state_file.exists():
            return MessageState()

        try:
            with open(self._state_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            viewed = data.get('viewed', [])
            if not isinstance(viewed, list):
                return MessageState()
            return MessageState(viewed={str(h) for h in viewed})
        except (json.JSONDecodeError, OSError, AttributeError) as e:
            logger.debug(f"Ignoring unreadable message state {self._state_file}: {e}")
            return MessageState()

    def save(self, state: MessageState) -> None:
        """Save the viewed hashes. Failures are logged, not raised."""
        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
            with open(self._state_file, 'w', encoding='utf-8') as f:
                json.dump({'viewed': sorted(state.viewed)}, f, indent=2)
        except OSError as e:
            logger.warning(f"Error updating viewed messages: {e}")
