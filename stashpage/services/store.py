from __future__ import annotations

import json

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from stashpage.extensions import db
from stashpage.models import StashRecord, utcnow
from stashpage.services.defaults import default_document
from stashpage.services.document import UnifiedStash
from stashpage.services.errors import InvalidStructure, StorageFailure


class DocumentStore:
    """Whole-document persistence: one JSON blob per user, get/set only.

    Writes replace the previous document in a single transaction. There is no
    revision check, so two overlapping read-modify-write requests for the same
    user resolve as last-write-wins.
    """

    def get(self, user_id: int) -> UnifiedStash:
        if not user_id:
            return UnifiedStash.empty()
        try:
            record = StashRecord.query.filter_by(user_id=user_id).first()
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.error(
                "Failed to load stash for user %s: %s", user_id, exc
            )
            raise StorageFailure("Failed to load stash data.") from exc

        if record is None or not record.stash_data:
            return UnifiedStash.empty()

        try:
            return UnifiedStash.from_dict(json.loads(record.stash_data))
        except (ValueError, InvalidStructure) as exc:
            current_app.logger.error(
                "Stored stash for user %s is unreadable: %s", user_id, exc
            )
            raise StorageFailure("Stored stash data is unreadable.") from exc

    def set(self, user_id: int, doc: UnifiedStash) -> bool:
        if not user_id:
            raise StorageFailure("Cannot save stash data without a user.")
        payload = json.dumps(doc.to_dict(), ensure_ascii=False)
        try:
            record = StashRecord.query.filter_by(user_id=user_id).first()
            if record is None:
                record = StashRecord(user_id=user_id)
                db.session.add(record)
            record.stash_data = payload
            record.updated_at = utcnow()
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.error(
                "Failed to save stash for user %s: %s", user_id, exc
            )
            raise StorageFailure() from exc
        return True

    def initialize(self, user_id: int) -> bool:
        current_app.logger.info("Seeding default stash for user %s", user_id)
        return self.set(user_id, default_document())


store = DocumentStore()
