"""Typed form of the unified stash document.

Storage shape::

    {"stashes": {"<page key>": {"categories": [...], "is_public": 0}}}

Each category is stored as ``{title, icon, baseUrl, color, links, positions}``
with ``positions = {"collapsed": 0|1, "geometry": {"x": .., "y": ..}}``.
``from_dict`` is the only way raw JSON enters the model, so shape checks
live there; ``to_dict`` always emits the canonical layout.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from stashpage.services.common import (
    is_valid_page_key,
    parse_number,
    sanitize_color,
    to_flag,
)
from stashpage.services.errors import InvalidStructure


def _text(value) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass
class Link:
    name: str = ""
    url: str = ""
    icon: str = ""

    @classmethod
    def from_dict(cls, data) -> "Link":
        if not isinstance(data, dict):
            raise InvalidStructure("Each link must be an object.")
        return cls(
            name=_text(data.get("name")),
            url=_text(data.get("url")),
            icon=_text(data.get("icon")),
        )

    def to_dict(self) -> dict:
        return {"name": self.name, "url": self.url, "icon": self.icon}


@dataclass
class Geometry:
    x: int | float | None = None
    y: int | float | None = None

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass
class Category:
    title: str
    icon: str = ""
    base_url: str = ""
    color: str | None = None
    links: list[Link] = field(default_factory=list)
    collapsed: int = 0
    geometry: Geometry | None = None

    @classmethod
    def from_dict(cls, data) -> "Category":
        if not isinstance(data, dict):
            raise InvalidStructure("Each category must be an object.")

        raw_links = data.get("links")
        if raw_links is None:
            raw_links = []
        if not isinstance(raw_links, list):
            raise InvalidStructure(
                f"Category '{_text(data.get('title'))}' has malformed links."
            )

        positions = data.get("positions")
        if not isinstance(positions, dict):
            positions = {}
        raw_geometry = positions.get("geometry")
        geometry = None
        if isinstance(raw_geometry, dict):
            geometry = Geometry(
                x=parse_number(raw_geometry.get("x")),
                y=parse_number(raw_geometry.get("y")),
            )

        raw_color = data.get("color")
        return cls(
            title=_text(data.get("title")),
            icon=_text(data.get("icon")),
            base_url=_text(data.get("baseUrl")),
            color=sanitize_color(raw_color) if raw_color not in (None, "") else None,
            links=[Link.from_dict(item) for item in raw_links],
            collapsed=to_flag(positions.get("collapsed")),
            geometry=geometry,
        )

    def to_dict(self) -> dict:
        positions: dict = {"collapsed": self.collapsed}
        if self.geometry is not None:
            positions["geometry"] = self.geometry.to_dict()
        payload = {
            "title": self.title,
            "icon": self.icon,
            "baseUrl": self.base_url,
            "links": [link.to_dict() for link in self.links],
            "positions": positions,
        }
        if self.color is not None:
            payload["color"] = self.color
        return payload


@dataclass
class StashPage:
    categories: list[Category] = field(default_factory=list)
    is_public: bool = False

    @classmethod
    def from_dict(cls, data) -> "StashPage":
        if not isinstance(data, dict):
            raise InvalidStructure("Each stash page must be an object.")
        raw_categories = data.get("categories")
        if raw_categories is None:
            raw_categories = []
        if not isinstance(raw_categories, list):
            raise InvalidStructure("Stash page categories must be a list.")
        return cls(
            categories=[Category.from_dict(item) for item in raw_categories],
            is_public=bool(to_flag(data.get("is_public"))),
        )

    def to_dict(self) -> dict:
        return {
            "categories": [category.to_dict() for category in self.categories],
            "is_public": 1 if self.is_public else 0,
        }

    def find_category(self, title: str) -> Category | None:
        for category in self.categories:
            if category.title == title:
                return category
        return None


@dataclass
class UnifiedStash:
    stashes: dict[str, StashPage] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "UnifiedStash":
        return cls(stashes={})

    @classmethod
    def from_dict(cls, data) -> "UnifiedStash":
        if not isinstance(data, dict) or not isinstance(data.get("stashes"), dict):
            raise InvalidStructure()

        stashes: dict[str, StashPage] = {}
        for page_key, page in data["stashes"].items():
            if not is_valid_page_key(page_key):
                raise InvalidStructure(f"Invalid page name '{page_key}'.")
            stashes[page_key] = StashPage.from_dict(page)
        return cls(stashes=stashes)

    def to_dict(self) -> dict:
        return {"stashes": {key: page.to_dict() for key, page in self.stashes.items()}}

    def has_page(self, page_key: str) -> bool:
        return page_key in self.stashes

    def page(self, page_key: str) -> StashPage | None:
        return self.stashes.get(page_key)

    def page_names(self) -> list[str]:
        return sorted(self.stashes)
