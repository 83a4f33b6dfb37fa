"""Interview session rows and the per-question responses written into them."""
import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models.records import COMPLETE, IN_PROGRESS, InterviewResponse, InterviewSession, db
from services.errors import StorageFailure

logger = logging.getLogger(__name__)


class SessionRepository:

    def get_or_create_in_progress(self, owner_id: str) -> int:
        """Return the owner's open session id, creating it if none exists.

        The partial unique index on (owner_id, in_progress) makes the insert lose cleanly
        when another request created the row first; that row is then returned.
        """
        try:
            existing = InterviewSession.query.filter_by(owner_id=owner_id, status=IN_PROGRESS).first()
            if existing is not None:
                return existing.id
            row = InterviewSession(owner_id=owner_id, status=IN_PROGRESS)
            db.session.add(row)
            db.session.commit()
            logger.info("[SESSION] created session id=%s owner=%s", row.id, owner_id)
            return row.id
        except IntegrityError:
            db.session.rollback()
            existing = InterviewSession.query.filter_by(owner_id=owner_id, status=IN_PROGRESS).first()
            if existing is None:
                raise StorageFailure("Could not open an interview session.", "session")
            return existing.id
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageFailure("Could not open an interview session.", "session") from e

    def complete(self, session_id: int) -> None:
        try:
            row = db.session.get(InterviewSession, session_id)
            if row is None or row.status == COMPLETE:
                return
            row.status = COMPLETE
            row.completed_at = datetime.now(timezone.utc)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageFailure("Could not close the interview session.", "session") from e
        logger.info("[SESSION] completed session id=%s", session_id)

    def save_response(self, session_id: int, owner_id: str, question_number: int, question_text: str,
                      transcript: str, leadership_principle: str, report, audio_reference: str = None) -> int:
        row = InterviewResponse(
            session_id=session_id,
            owner_id=owner_id,
            question_number=question_number,
            question_text=question_text,
            transcript=transcript,
            leadership_principle=leadership_principle,
            overall_score=report.overall.score,
            overall_feedback=report.overall.feedback,
            star_analysis=report.star.model_dump(),
            audio_reference=audio_reference,
        )
        try:
            db.session.add(row)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageFailure("Could not save your answer.", "storage") from e
        return row.id

    def responses_for(self, session_id: int) -> list:
        return (
            InterviewResponse.query
            .filter_by(session_id=session_id)
            .order_by(InterviewResponse.question_number)
            .all()
        )
