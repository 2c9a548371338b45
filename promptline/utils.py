"""
Utility functions for promptline.
"""
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Callable, Iterable, Optional, TypeVar

T = TypeVar('T')
R = TypeVar('R')


def ordered_map(
    func: Callable[[T], R],
    items: Iterable[T],
    max_workers: Optional[int] = None,
) -> list[R]:
    """
    Apply a function to independent items on a thread pool.

    Results come back in input order, whatever order the work finishes in.

    Args:
        func: Function to apply to each item
        items: Items to process
        max_workers: Pool size (executor default if None)

    Returns:
        List of results in the same order as items
    """
    items = list(items)
    if len(items) <= 1:
        return [func(item) for item in items]

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(func, items))


def truncate_string(text: str, max_length: int, suffix: str = "") -> str:
    """
    Truncate a string to a maximum number of characters.

    Args:
        text: The string to truncate
        max_length: Maximum number of characters kept from text
        suffix: Appended only when text was truncated

    Returns:
        Truncated string
    """
    if max_length <= 0 or len(text) <= max_length:
        return text
    return text[:max_length] + suffix


def format_timestamp(timestamp: Optional[float] = None, fmt: str = "%H:%M:%S") -> str:
    """
    Format a timestamp to a human-readable string.

    Args:
        timestamp: Unix timestamp (uses current time if None)
        fmt: strftime format string

    Returns:
        Formatted timestamp string
    """
    if timestamp is None:
        timestamp = time.time()
    return datetime.fromtimestamp(timestamp).strftime(fmt)


def format_duration(milliseconds: int, show_milliseconds: bool = False) -> str:
    """
    Format a duration to a human-readable string.

    Args:
        milliseconds: Duration in milliseconds
        show_milliseconds: Whether to include the millisecond remainder

    Returns:
        Formatted duration string (e.g., "1h23m45s")
    """
    seconds, millis = divmod(int(milliseconds), 1000)
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    days, hours = divmod(hours, 24)

    parts = []
    for value, unit in ((days, "d"), (hours, "h"), (minutes, "m"), (seconds, "s")):
        if value or parts:
            parts.append(f"{value}{unit}")
    if show_milliseconds or not parts:
        parts.append(f"{millis}ms")

    return "".join(parts)


def is_windows() -> bool:
    """Check if running on Windows."""
    return sys.platform == 'win32'
