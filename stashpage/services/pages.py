from __future__ import annotations

import copy
from dataclasses import dataclass

from flask import current_app

from stashpage.services.common import (
    StashSettings,
    collapsed_flag,
    require_page_key,
    to_flag,
)
from stashpage.services.defaults import empty_page
from stashpage.services.document import UnifiedStash
from stashpage.services.errors import Conflict, Forbidden, InvalidInput, NotFound
from stashpage.services.store import DocumentStore, store as default_store
from stashpage.services.transforms import NOT_FOUND, render_page, save_page


@dataclass(frozen=True)
class StashActor:
    user_id: int
    is_demo: bool = False
    username: str = ""


# Pure document operations. They only touch the in-memory document; the
# caller decides whether to persist.


def list_page_names(doc: UnifiedStash) -> list[str]:
    return doc.page_names()


def delete_page(doc: UnifiedStash, page_key: str) -> bool:
    return doc.stashes.pop(page_key, None) is not None


def rename_page(doc: UnifiedStash, old_key: str, new_key: str) -> None:
    if doc.has_page(new_key):
        raise Conflict(f"Page '{new_key}' already exists.")
    if not doc.has_page(old_key):
        raise NotFound(f"Page '{old_key}' not found.")
    doc.stashes[new_key] = doc.stashes.pop(old_key)


def clone_page(doc: UnifiedStash, source_key: str, new_key: str) -> None:
    if doc.has_page(new_key):
        raise Conflict(f"Page '{new_key}' already exists.")
    if not doc.has_page(source_key):
        raise NotFound(f"Source page '{source_key}' not found.")
    doc.stashes[new_key] = copy.deepcopy(doc.stashes[source_key])


def set_category_state(doc: UnifiedStash, page_key: str, title: str, state) -> bool:
    page = doc.page(page_key)
    if page is None:
        return False
    # duplicate titles are possible; the first one wins
    category = page.find_category(title)
    if category is None:
        return False
    category.collapsed = collapsed_flag(state)
    return True


def set_page_public(doc: UnifiedStash, page_key: str, is_public) -> bool:
    page = doc.page(page_key)
    if page is None:
        return False
    page.is_public = bool(to_flag(is_public))
    return True


class PageOperations:
    """Read-modify-write page operations on behalf of one user.

    Every mutation loads the full document, changes it in memory and writes
    the full document back. Demo accounts and malformed page keys are
    rejected before the store is touched.
    """

    def __init__(
        self,
        actor: StashActor,
        settings: StashSettings,
        store: DocumentStore | None = None,
    ):
        self.actor = actor
        self.settings = settings
        self.store = store or default_store

    def _require_write(self, action: str) -> None:
        if self.actor.is_demo:
            current_app.logger.warning(
                "Demo user %s blocked from %s",
                self.actor.username or self.actor.user_id,
                action,
            )
            raise Forbidden(f"Demo account cannot {action}.")

    def document(self) -> UnifiedStash:
        return self.store.get(self.actor.user_id)

    def page_names(self) -> list[str]:
        return list_page_names(self.document())

    def render(self, page_key: str):
        require_page_key(page_key)
        return render_page(self.document(), page_key, self.settings)

    def open_for_edit(self, page_key: str) -> list[dict]:
        require_page_key(page_key)
        doc = self.document()
        categories = render_page(doc, page_key, self.settings)
        if categories is not NOT_FOUND:
            return categories

        self._require_write("create new pages")
        doc.stashes[page_key] = empty_page()
        self.store.set(self.actor.user_id, doc)
        current_app.logger.info(
            "Created page %s for user %s", page_key, self.actor.user_id
        )
        return render_page(doc, page_key, self.settings)

    def save(self, page_key: str, categories) -> None:
        self._require_write("save edits")
        require_page_key(page_key)
        if not isinstance(categories, list):
            raise InvalidInput("Stash data must be a list of categories.")
        limit = self.settings.max_categories_per_page
        if limit > 0 and len(categories) > limit:
            raise InvalidInput(f"A page can hold at most {limit} categories.")

        doc = self.document()
        if not save_page(doc, page_key, categories, self.settings):
            raise InvalidInput("Stash data was rejected.")
        self.store.set(self.actor.user_id, doc)

    def delete(self, page_key: str) -> None:
        self._require_write("delete pages")
        require_page_key(page_key)
        doc = self.document()
        if not delete_page(doc, page_key):
            return
        self.store.set(self.actor.user_id, doc)
        current_app.logger.info(
            "Deleted page %s for user %s", page_key, self.actor.user_id
        )

    def rename(self, old_key: str, new_key: str) -> None:
        self._require_write("rename pages")
        require_page_key(old_key)
        require_page_key(new_key, "Invalid page name format.")
        doc = self.document()
        rename_page(doc, old_key, new_key)
        self.store.set(self.actor.user_id, doc)
        current_app.logger.info(
            "Renamed page %s to %s for user %s", old_key, new_key, self.actor.user_id
        )

    def clone(self, source_key: str, new_key: str) -> None:
        self._require_write("clone pages")
        require_page_key(source_key)
        require_page_key(new_key, "Invalid page name format.")
        doc = self.document()
        clone_page(doc, source_key, new_key)
        self.store.set(self.actor.user_id, doc)
        current_app.logger.info(
            "Cloned page %s to %s for user %s", source_key, new_key, self.actor.user_id
        )

    def set_category_state(self, page_key: str, title: str, state) -> None:
        self._require_write("change category state")
        require_page_key(page_key)
        doc = self.document()
        if not set_category_state(doc, page_key, title, state):
            raise NotFound("Page or category not found.")
        self.store.set(self.actor.user_id, doc)

    def set_public(self, page_key: str, is_public) -> int:
        self._require_write("modify public status")
        require_page_key(page_key)
        doc = self.document()
        if not set_page_public(doc, page_key, is_public):
            raise NotFound(f"Page '{page_key}' not found.")
        self.store.set(self.actor.user_id, doc)
        return 1 if doc.stashes[page_key].is_public else 0


def render_public_page(
    owner_id: int,
    page_key: str,
    settings: StashSettings,
    store: DocumentStore | None = None,
) -> list[dict]:
    require_page_key(page_key)
    doc = (store or default_store).get(owner_id)
    page = doc.page(page_key)
    if page is None or not page.is_public:
        raise NotFound("Page not found.")
    return render_page(doc, page_key, settings)
