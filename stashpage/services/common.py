from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Mapping

from stashpage.services.errors import InvalidInput


PAGE_KEY_RE = re.compile(r"^[\w_\-.]+$")
HEX_COLOR_RE = re.compile(r"^#[0-9a-f]{6}$")
DEFAULT_COLOR = "#3b82f6"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class StashSettings:
    default_position_x: int | float = 50
    default_position_y: int | float = 50
    max_categories_per_page: int = 50
    enable_position_validation: bool = True
    search_min_length: int = 2

    @classmethod
    def from_config(cls, config: Mapping) -> "StashSettings":
        return cls(
            default_position_x=config.get("STASH_DEFAULT_POSITION_X", 50),
            default_position_y=config.get("STASH_DEFAULT_POSITION_Y", 50),
            max_categories_per_page=config.get("STASH_MAX_CATEGORIES_PER_PAGE", 50),
            enable_position_validation=bool(
                config.get("STASH_ENABLE_POSITION_VALIDATION", True)
            ),
            search_min_length=config.get("SEARCH_MIN_QUERY_LENGTH", 2),
        )


def is_valid_page_key(value) -> bool:
    return isinstance(value, str) and bool(PAGE_KEY_RE.match(value))


def require_page_key(value, message: str = "Invalid page name.") -> str:
    if not is_valid_page_key(value):
        raise InvalidInput(message)
    return value


def sanitize_color(value) -> str:
    if value is None or value == "":
        return DEFAULT_COLOR
    color = re.sub(r"\s+", "", str(value)).lower()
    if not color.startswith("#"):
        color = f"#{color}"
    if not HEX_COLOR_RE.match(color):
        return DEFAULT_COLOR
    return color


def parse_number(value) -> int | float | None:
    """Best-effort numeric read of a JSON coordinate; None when unusable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return None
    if isinstance(number, float):
        if math.isnan(number) or math.isinf(number):
            return None
        if number.is_integer():
            return int(number)
    return number


def coerce_position(value, default, clamp: bool = True) -> int | float:
    number = parse_number(value)
    if not number:
        number = default
    if clamp and number < 0:
        return 0
    return number


def to_flag(value) -> int:
    if isinstance(value, str):
        return 1 if value.strip().lower() in _TRUTHY else 0
    return 1 if value else 0


def collapsed_flag(state) -> int:
    if isinstance(state, str) and state.strip().lower() == "collapsed":
        return 1
    return to_flag(state)
