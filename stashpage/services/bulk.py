from __future__ import annotations

import json
from dataclasses import dataclass, field

from flask import current_app

from stashpage.services.document import UnifiedStash
from stashpage.services.errors import Forbidden, InvalidFormat, InvalidStructure
from stashpage.services.store import DocumentStore, store as default_store


EXPORT_FILENAME = "stash_backup.json"


def export_document(doc: UnifiedStash) -> str:
    return json.dumps(doc.to_dict(), indent=2, ensure_ascii=False)


def parse_import(raw: bytes | str) -> UnifiedStash:
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise InvalidFormat() from exc
    if not raw or not raw.strip():
        raise InvalidFormat("No file uploaded or file is empty.")
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise InvalidFormat() from exc
    return UnifiedStash.from_dict(payload)


def import_document(
    actor,
    raw: bytes | str,
    store: DocumentStore | None = None,
) -> UnifiedStash:
    """Replace the actor's whole document with an uploaded export.

    This overwrites every existing page; nothing is merged. The upload is
    fully validated first, so a rejected file leaves the stored document as
    it was.
    """
    if actor.is_demo:
        raise Forbidden("Demo account cannot import data.")
    try:
        doc = parse_import(raw)
    except (InvalidFormat, InvalidStructure) as exc:
        current_app.logger.warning(
            "Rejected stash import for user %s: %s", actor.user_id, exc
        )
        raise
    (store or default_store).set(actor.user_id, doc)
    current_app.logger.info(
        "Imported %d pages for user %s", len(doc.stashes), actor.user_id
    )
    return doc


@dataclass
class SearchOutcome:
    results: list[dict] = field(default_factory=list)
    too_short: bool = False

    def as_dict(self) -> dict:
        payload: dict = {"results": self.results}
        if self.too_short:
            payload["error"] = "Query too short"
        return payload


def query_too_short(query: str, min_length: int = 2) -> bool:
    return len(query or "") < min_length


def search_links(doc: UnifiedStash, query: str, min_length: int = 2) -> SearchOutcome:
    if query_too_short(query, min_length):
        return SearchOutcome(results=[], too_short=True)

    q = (query or "").lower()
    results = []
    for page_key in doc.page_names():
        for category in doc.stashes[page_key].categories:
            for link in category.links:
                if q in link.name.lower() or q in link.url.lower():
                    results.append(
                        {
                            "name": link.name,
                            "url": link.url,
                            "icon": link.icon or "",
                            "stash": page_key,
                        }
                    )
    return SearchOutcome(results=results)
