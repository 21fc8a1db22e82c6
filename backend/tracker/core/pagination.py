"""Pagination Window — turns untrusted limit/offset/page input into a bounded window.

Invariants:
    - PURE: no IO, never raises on bad input
    - 1 <= limit <= MAX_PAGE_SIZE, 0 <= offset <= MAX_OFFSET
    - Explicit offset wins over page; page is 1-based
    - has_more is derived from total and offset + returned, never from page fullness

Design Decisions:
    - Silent clamping instead of 400s: list endpoints degrade to defaults the same
      way filters do
"""

from dataclasses import dataclass

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 20
# Past any real row count, still inside a signed 64-bit OFFSET
MAX_OFFSET = 2**62


@dataclass(frozen=True)
class Window:
    """Effective LIMIT/OFFSET for one page."""
    limit: int
    offset: int


def _as_int(value: object) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _clamp_offset(offset: int) -> int:
    return max(0, min(offset, MAX_OFFSET))


def clamp_limit(limit: object, default: int = DEFAULT_PAGE_SIZE) -> int:
    parsed = _as_int(limit)
    if parsed is None:
        parsed = default
    return max(1, min(parsed, MAX_PAGE_SIZE))


def compile_window(
    limit: object = None,
    offset: object = None,
    page: object = None,
    default_limit: int = DEFAULT_PAGE_SIZE,
) -> Window:
    """Build the page window. Offsets past the end are kept: they yield empty pages."""
    effective_limit = clamp_limit(limit, default_limit)

    parsed_offset = _as_int(offset)
    if parsed_offset is not None:
        return Window(effective_limit, _clamp_offset(parsed_offset))

    parsed_page = _as_int(page)
    if parsed_page is not None and parsed_page >= 1:
        return Window(effective_limit, _clamp_offset((parsed_page - 1) * effective_limit))

    return Window(effective_limit, 0)


def has_more(total: int, window: Window, returned: int) -> bool:
    return window.offset + returned < total
