# mypy: disable-error-code=name-defined

from __future__ import annotations

from app.extensions.database import db
from app.utils.datetime_utils import utc_now_naive


class StoredCollection(db.Model):
    """One JSON-encoded record collection, addressed by its storage key."""

    __tablename__ = "stored_collections"

    key = db.Column(db.String(128), primary_key=True)
    payload = db.Column(db.Text, nullable=False, default="[]")
    updated_at = db.Column(
        db.DateTime,
        default=utc_now_naive,
        onupdate=utc_now_naive,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<StoredCollection key={self.key!r} size={len(self.payload or '')}>"
