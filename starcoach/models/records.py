"""Database models: uploaded documents, interview sessions, per-question responses."""

from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

RESUME = "resume"
JOB_DESCRIPTION = "job_description"
DOCUMENT_KINDS = (RESUME, JOB_DESCRIPTION)

IN_PROGRESS = "in_progress"
COMPLETE = "complete"


def _utcnow():
    return datetime.now(timezone.utc)


class Document(db.Model):
    """Insert-only; a re-upload supersedes the older row instead of replacing it."""
    __tablename__ = 'documents'

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.String(64), nullable=False, index=True)
    kind = db.Column(db.String(32), nullable=False)  # resume / job_description
    raw_text = db.Column(db.Text, nullable=False)
    filename = db.Column(db.String(256))
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)

    def __repr__(self):
        return f'<Document {self.id} {self.kind} owner={self.owner_id}>'


class InterviewSession(db.Model):
    __tablename__ = 'interview_sessions'
    # At most one open session per owner, so a retried first feedback request cannot fork the run.
    __table_args__ = (
        db.Index(
            'uq_interview_sessions_owner_in_progress',
            'owner_id',
            unique=True,
            sqlite_where=db.text("status = 'in_progress'"),
            postgresql_where=db.text("status = 'in_progress'"),
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.String(64), nullable=False, index=True)
    status = db.Column(db.String(20), default=IN_PROGRESS, nullable=False)  # in_progress / complete
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)
    completed_at = db.Column(db.DateTime)

    responses = db.relationship('InterviewResponse', backref='session', lazy='dynamic')

    def __repr__(self):
        return f'<InterviewSession {self.id} owner={self.owner_id} {self.status}>'


class InterviewResponse(db.Model):
    """One answered question; written once after evaluation succeeds."""
    __tablename__ = 'interview_responses'

    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.Integer, db.ForeignKey('interview_sessions.id'), nullable=False, index=True)
    owner_id = db.Column(db.String(64), nullable=False, index=True)
    question_number = db.Column(db.Integer, nullable=False)
    question_text = db.Column(db.Text, nullable=False)
    transcript = db.Column(db.Text, nullable=False)
    leadership_principle = db.Column(db.String(128), nullable=False)
    overall_score = db.Column(db.Integer, nullable=False)
    overall_feedback = db.Column(db.Text)
    star_analysis = db.Column(db.JSON)
    audio_reference = db.Column(db.String(512))
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)

    def __repr__(self):
        return f'<InterviewResponse session={self.session_id} q={self.question_number} score={self.overall_score}>'
