from __future__ import annotations

from stashpage.services.common import (
    DEFAULT_COLOR,
    StashSettings,
    coerce_position,
    collapsed_flag,
    is_valid_page_key,
    sanitize_color,
)
from stashpage.services.document import (
    Category,
    Geometry,
    Link,
    StashPage,
    UnifiedStash,
)


class _NotFound:
    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = _NotFound()


def render_category(category: Category, settings: StashSettings) -> dict:
    geometry = category.geometry or Geometry()
    x = geometry.x if geometry.x is not None else settings.default_position_x
    y = geometry.y if geometry.y is not None else settings.default_position_y
    return {
        "title": category.title,
        "icon": category.icon,
        "items": [link.to_dict() for link in category.links],
        "x": x,
        "y": y,
        "collapsed": category.collapsed or 0,
        "baseUrl": category.base_url,
        "color": category.color or DEFAULT_COLOR,
    }


def render_page(doc: UnifiedStash, page_key: str, settings: StashSettings):
    """Flatten a stored page into render-shape categories.

    Returns ``NOT_FOUND`` when the page does not exist, otherwise a list
    sorted left-to-right by ``x`` and then top-to-bottom by ``y`` so that
    single-column layouts read in a stable order.
    """
    page = doc.page(page_key)
    if page is None:
        return NOT_FOUND
    categories = [render_category(category, settings) for category in page.categories]
    categories.sort(key=lambda item: (item["x"], item["y"]))
    return categories


def _text(value) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def build_category(raw, settings: StashSettings) -> Category | None:
    if not isinstance(raw, dict):
        return None
    title = raw.get("title")
    if title is None or title == "":
        return None
    items = raw.get("items")
    if not isinstance(items, list):
        return None

    clamp = settings.enable_position_validation
    x = coerce_position(raw.get("x"), settings.default_position_x, clamp=clamp)
    y = coerce_position(raw.get("y"), settings.default_position_y, clamp=clamp)

    return Category(
        title=_text(title),
        icon=_text(raw.get("icon")),
        base_url=_text(raw.get("baseUrl")),
        color=sanitize_color(raw.get("color")),
        links=[Link.from_dict(item) for item in items if isinstance(item, dict)],
        collapsed=collapsed_flag(raw.get("collapsed")),
        geometry=Geometry(x=x, y=y),
    )


def save_page(
    doc: UnifiedStash,
    page_key: str,
    categories,
    settings: StashSettings,
    writable: bool = True,
) -> bool:
    """Replace a page's categories with the sanitized render-shape input.

    Rejected saves return False and leave ``doc`` untouched. Individual
    malformed categories are dropped instead of failing the whole save.
    """
    if not writable or not is_valid_page_key(page_key):
        return False
    if not isinstance(categories, list):
        return False
    limit = settings.max_categories_per_page
    if limit > 0 and len(categories) > limit:
        return False

    built = []
    for raw in categories:
        category = build_category(raw, settings)
        if category is not None:
            built.append(category)

    existing = doc.page(page_key)
    doc.stashes[page_key] = StashPage(
        categories=built,
        is_public=existing.is_public if existing else False,
    )
    return True
