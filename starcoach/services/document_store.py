"""Uploaded resume / job description persistence."""
import logging
import re

from sqlalchemy.exc import SQLAlchemyError

from models.records import DOCUMENT_KINDS, Document, db
from services.errors import DocumentNotFound, StorageFailure, ValidationError

logger = logging.getLogger(__name__)

# NUL and other control bytes break some drivers; tab/newline/CR are kept.
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def sanitize_text(text: str) -> str:
    return _CONTROL_CHARS.sub("", text or "")


class DocumentStore:
    """Handles document writes and latest-of-kind lookups."""

    def put(self, owner_id: str, kind: str, text: str, filename: str = None) -> int:
        if kind not in DOCUMENT_KINDS:
            raise ValidationError(f"Unknown document kind: {kind!r}", "documents")
        clean = sanitize_text(text).strip()
        if not clean:
            raise ValidationError(f"The {kind.replace('_', ' ')} is empty.", "documents")

        doc = Document(owner_id=owner_id, kind=kind, raw_text=clean, filename=filename)
        try:
            db.session.add(doc)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("[DOCS] store %s failed: %s", kind, e)
            raise StorageFailure(f"Could not save the {kind.replace('_', ' ')}.", "documents") from e
        logger.info("[DOCS] stored %s id=%s chars=%d", kind, doc.id, len(clean))
        return doc.id

    def latest(self, owner_id: str, kind: str) -> str:
        try:
            doc = (
                Document.query
                .filter_by(owner_id=owner_id, kind=kind)
                .order_by(Document.created_at.desc(), Document.id.desc())
                .first()
            )
        except SQLAlchemyError as e:
            raise StorageFailure(f"Could not load the {kind.replace('_', ' ')}.", "documents") from e
        if doc is None:
            raise DocumentNotFound(f"No {kind.replace('_', ' ')} uploaded yet.")
        return doc.raw_text
