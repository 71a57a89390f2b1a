"""Timeline model: the fixed window of days around an anchor.

Pure functions plus a small immutable ``Timeline`` bundle used by the
selection state machine and the date strip widget. Pixel math assumes the
scroll surface carries leading padding of ``(surface width - item width) / 2``
so that the item at offset ``index * pitch`` appears centered.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Sequence

from ..utils.datefmt import as_day


def build_window(anchor: date | datetime, half_width: int) -> tuple[date, ...]:
    """Return ``2 * half_width + 1`` consecutive days with the anchor at ``half_width``."""
    if half_width < 0:
        raise ValueError("half_width must be >= 0")
    center = as_day(anchor)
    return tuple(
        center + timedelta(days=i) for i in range(-half_width, half_width + 1)
    )


def index_of(timeline: Sequence[date], day: date | datetime | None) -> Optional[int]:
    """Construction index of ``day`` (calendar-day match) or None when outside."""
    if day is None or not timeline:
        return None
    target = as_day(day)
    # Window is contiguous, so the index is the day delta from the first entry.
    idx = (target - timeline[0]).days
    if 0 <= idx < len(timeline) and timeline[idx] == target:
        return idx
    return None


def pixel_offset(index: int, item_width: float, margin: float) -> float:
    return index * (item_width + 2 * margin)


def leading_padding(surface_width: float, item_width: float) -> float:
    """Content padding that puts item 0 at the surface center when scrolled to 0."""
    return max(0.0, (surface_width - item_width) / 2.0)


def index_at_offset(
    offset: float, count: int, item_width: float, margin: float
) -> int:
    """Nearest item index for a scroll offset, clamped to the window."""
    if count <= 0:
        return 0
    pitch = item_width + 2 * margin
    if pitch <= 0:
        return 0
    idx = int(round(offset / pitch))
    return max(0, min(idx, count - 1))


@dataclass(frozen=True)
class Geometry:
    item_width: float = 80.0
    margin: float = 2.0

    @property
    def pitch(self) -> float:
        return self.item_width + 2 * self.margin


@dataclass(frozen=True)
class Timeline:
    """Immutable window of days built once per controller."""

    anchor: date
    half_width: int
    geometry: Geometry = field(default_factory=Geometry)
    days: tuple[date, ...] = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "anchor", as_day(self.anchor))
        object.__setattr__(self, "days", build_window(self.anchor, self.half_width))

    # Sequence-ish access
    def __len__(self) -> int:
        return len(self.days)

    def __iter__(self) -> Iterator[date]:
        return iter(self.days)

    def __getitem__(self, index: int) -> date:
        return self.days[index]

    @property
    def anchor_index(self) -> int:
        return self.half_width

    def index_of(self, day: date | datetime | None) -> Optional[int]:
        return index_of(self.days, day)

    def contains(self, day: date | datetime | None) -> bool:
        return self.index_of(day) is not None

    def is_anchor(self, day: date | datetime | None) -> bool:
        return day is not None and as_day(day) == self.anchor

    def offset_for(self, day: date | datetime | None) -> Optional[float]:
        idx = self.index_of(day)
        if idx is None:
            return None
        return pixel_offset(idx, self.geometry.item_width, self.geometry.margin)

    def index_at_offset(self, offset: float) -> int:
        return index_at_offset(
            offset, len(self.days), self.geometry.item_width, self.geometry.margin
        )


__all__ = [
    "Geometry",
    "Timeline",
    "build_window",
    "index_of",
    "pixel_offset",
    "leading_padding",
    "index_at_offset",
]
