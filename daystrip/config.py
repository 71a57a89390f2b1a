"""Picker configuration.

All timing constants and geometry live in one frozen dataclass so the
controller, state machine and widgets agree on them. ``PickerConfig.from_env``
lets a launch override individual values through ``DAYSTRIP_*`` variables:

    DAYSTRIP_HALF_WIDTH        days shown either side of today (default 7)
    DAYSTRIP_ITEM_WIDTH        item width in px (default 80)
    DAYSTRIP_ITEM_MARGIN       horizontal margin per side in px (default 2)
    DAYSTRIP_AUTO_RETURN_MS    idle time before returning to today (default 6000)
    DAYSTRIP_RECENTER_MS       delay before centering on a changed date (default 50)
    DAYSTRIP_FIRST_LAYOUT_MS   delay before the first centering (default 150)
    DAYSTRIP_TAP_GRACE_MS      interaction grace after a tap (default 400)
    DAYSTRIP_DRAG_GRACE_MS     interaction grace after drag/momentum end (default 500)
    DAYSTRIP_SCROLL_ANIM_MS    animated scroll duration (default 250)

Invalid values are ignored per field with a warning.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Mapping, Optional

from .core.timeline import Geometry

logger = logging.getLogger(__name__)

_ENV_PREFIX = "DAYSTRIP_"
_ENV_NAMES = {
    "half_width": "HALF_WIDTH",
    "item_width": "ITEM_WIDTH",
    "item_margin": "ITEM_MARGIN",
    "auto_return_ms": "AUTO_RETURN_MS",
    "recenter_ms": "RECENTER_MS",
    "first_layout_ms": "FIRST_LAYOUT_MS",
    "tap_grace_ms": "TAP_GRACE_MS",
    "drag_grace_ms": "DRAG_GRACE_MS",
    "scroll_animation_ms": "SCROLL_ANIM_MS",
}


@dataclass(frozen=True)
class PickerConfig:
    half_width: int = 7
    item_width: int = 80
    item_margin: int = 2
    auto_return_ms: int = 6000
    recenter_ms: int = 50
    first_layout_ms: int = 150
    tap_grace_ms: int = 400
    drag_grace_ms: int = 500
    scroll_animation_ms: int = 250

    @property
    def geometry(self) -> Geometry:
        return Geometry(item_width=float(self.item_width), margin=float(self.item_margin))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PickerConfig":
        env = os.environ if environ is None else environ
        overrides: dict[str, int] = {}
        for f in fields(cls):
            key = _ENV_PREFIX + _ENV_NAMES[f.name]
            raw = env.get(key)
            if raw is None or raw.strip() == "":
                continue
            try:
                value = int(raw)
            except ValueError:
                logger.warning("Ignoring %s=%r: not an integer", key, raw)
                continue
            if value < 0:
                logger.warning("Ignoring %s=%r: must be >= 0", key, raw)
                continue
            overrides[f.name] = value
        return replace(cls(), **overrides)


def env_flag(name: str, environ: Optional[Mapping[str, str]] = None) -> bool:
    """Truthy check for ``DAYSTRIP_<name>`` (1/true/yes/on)."""
    env = os.environ if environ is None else environ
    raw = env.get(_ENV_PREFIX + name, "")
    return raw.strip().lower() in ("1", "true", "yes", "on")


def screen_index(environ: Optional[Mapping[str, str]] = None) -> Optional[int]:
    env = os.environ if environ is None else environ
    raw = env.get(_ENV_PREFIX + "SCREEN_INDEX")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %sSCREEN_INDEX=%r", _ENV_PREFIX, raw)
        return None


__all__ = ["PickerConfig", "env_flag", "screen_index"]
