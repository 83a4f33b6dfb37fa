"""Interview wizard state: upload -> principles -> question/feedback loop -> final."""
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from models.catalog import fallback_pool, resolve_principle, round_robin
from models.records import JOB_DESCRIPTION, RESUME
from models.schemas import LeadershipPrinciple, Question, ScoreReport
from services.errors import CoachError, SessionBusyError, SessionStateError, ValidationError
from services.feedback_service import FeedbackService, aggregate_score

logger = logging.getLogger(__name__)


class Step(str, Enum):
    LANDING = "landing"
    UPLOADING = "uploading"
    PRINCIPLE_SELECTION = "principle_selection"
    QUESTION = "question"
    FEEDBACK = "feedback"
    FINAL = "final"


@dataclass
class QuestionResult:
    question_number: int
    question: Question
    transcript: str
    report: ScoreReport

    @property
    def overall_score(self) -> int:
        return self.report.overall_score

    def to_dict(self) -> dict:
        return {
            "question_number": self.question_number,
            "question": self.question.to_wire(),
            "transcript": self.transcript,
            "report": self.report.to_wire(),
        }


class InterviewSessionController:
    """Manages one owner's interview run.

    Every operation takes the same non-blocking lock: a second call while one is in
    flight is rejected with SessionBusyError rather than queued, since the downstream
    services are not idempotent.
    """

    def __init__(self, owner_id: str, documents, sessions, analyzer, condenser, evaluator,
                 question_count: int = 5, focus_limit: int = 3, listeners: List[Callable] = None):
        self.owner_id = owner_id
        self.documents = documents
        self.sessions = sessions
        self.analyzer = analyzer
        self.condenser = condenser
        self.evaluator = evaluator
        self.question_count = question_count
        self.focus_limit = focus_limit
        self.listeners = listeners if listeners is not None else []
        self._lock = threading.Lock()
        self._clear()

    def _clear(self):
        self.step = Step.LANDING
        self.principles: List[LeadershipPrinciple] = []
        self.all_questions: List[Question] = []
        self.question_pool: List[Question] = []
        self.questions: List[Question] = []
        self.used_fallback = False
        self.focus_principle: Optional[str] = None
        self.current_index = 0
        self.results: List[QuestionResult] = []
        self.draft_transcript = ""
        self.last_error = None
        self.session_id = None
        self.busy = False

    # -- plumbing -------------------------------------------------------

    @contextmanager
    def _operation(self, name: str, external: bool = False):
        if not self._lock.acquire(blocking=False):
            raise SessionBusyError(f"Still working on the previous request; '{name}' was not started.")
        try:
            if external:
                self.busy = True
                self._notify()
            try:
                yield
            except CoachError as e:
                self.last_error = e.to_dict()
                logger.warning("[SESSION] %s failed at %s: %s", name, e.stage, e.message)
                raise
            self.last_error = None
        finally:
            self.busy = False
            self._lock.release()
            self._notify()

    def _require(self, *steps: Step):
        if self.step not in steps:
            allowed = ", ".join(s.value for s in steps)
            raise SessionStateError(f"Not allowed in step '{self.step.value}' (expected {allowed}).")

    def _notify(self):
        if not self.listeners:
            return
        snap = self.snapshot()
        for listener in self.listeners:
            try:
                listener(self.owner_id, snap)
            except Exception:
                logger.exception("[SESSION] state listener failed")

    # -- transitions ----------------------------------------------------

    def start(self):
        with self._operation("start"):
            self._require(Step.LANDING)
            self.step = Step.UPLOADING

    def submit_documents(self, resume_text: str, job_text: str,
                         resume_filename: str = None, job_filename: str = None):
        """Store both documents, analyze them, and open principle selection."""
        with self._operation("analyze", external=True):
            self._require(Step.UPLOADING)
            if not (resume_text or "").strip():
                raise ValidationError("Please upload a resume.", "upload")
            if not (job_text or "").strip():
                raise ValidationError("Please upload a job description.", "upload")

            self.documents.put(self.owner_id, RESUME, resume_text, resume_filename)
            self.documents.put(self.owner_id, JOB_DESCRIPTION, job_text, job_filename)
            analysis = self.analyzer.analyze(resume_text, job_text)

            self.principles = list(analysis.principles)
            if analysis.questions:
                self.all_questions = list(analysis.questions)
                self.question_pool = list(analysis.questions)
                self.used_fallback = False
            else:
                pool = fallback_pool([p.title for p in self.principles])
                self.question_pool = [q for qs in pool.values() for q in qs]
                self.all_questions = round_robin(pool, self.question_count)
                self.used_fallback = True
                logger.info("[SESSION] analyzer gave no questions, using %d fallback questions",
                            len(self.all_questions))
            self.step = Step.PRINCIPLE_SELECTION

    def select_principle(self, title: str = None):
        """Begin the question loop, optionally focused on one principle."""
        with self._operation("select_principle"):
            self._require(Step.PRINCIPLE_SELECTION)
            if title:
                entry = resolve_principle(title)
                canonical = entry[1] if entry else title
                focused = [q for q in self.question_pool if q.principle == canonical][:self.focus_limit]
                self.questions = focused or self.all_questions[:self.focus_limit]
                self.focus_principle = canonical
            else:
                self.questions = list(self.all_questions)
                self.focus_principle = None
            if not self.questions:
                raise SessionStateError("No questions available for this session.")
            self.current_index = 0
            self.draft_transcript = ""
            self.step = Step.QUESTION

    def request_feedback(self, transcript: str, audio_reference: str = None) -> QuestionResult:
        """Condense the resume for this question, score the transcript, persist the answer."""
        with self._operation("feedback", external=True):
            self._require(Step.QUESTION)
            if transcript is not None and not isinstance(transcript, str):
                raise ValidationError("The answer transcript must be text.", "feedback")
            self.draft_transcript = transcript or ""
            if not self.draft_transcript.strip():
                raise ValidationError("Please record or type an answer before requesting feedback.", "feedback")
            question = self.current_question
            transcript = self.draft_transcript.strip()

            resume_text = self.documents.latest(self.owner_id, RESUME)
            job_text = self.documents.latest(self.owner_id, JOB_DESCRIPTION)
            condensed = self.condenser.condense(resume_text, question.question_text, question.principle)
            report = self.evaluator.evaluate(question.question_text, transcript, condensed,
                                             job_text, question.principle)

            if self.session_id is None:
                self.session_id = self.sessions.get_or_create_in_progress(self.owner_id)
            number = self.current_index + 1
            self.sessions.save_response(
                session_id=self.session_id,
                owner_id=self.owner_id,
                question_number=number,
                question_text=question.question_text,
                transcript=transcript,
                leadership_principle=question.principle,
                report=report,
                audio_reference=audio_reference,
            )

            result = QuestionResult(question_number=number, question=question,
                                    transcript=transcript, report=report)
            self.results.append(result)
            self.step = Step.FEEDBACK
            logger.info("[SESSION] question %d scored %d", number, result.overall_score)
            return result

    def advance(self):
        with self._operation("advance"):
            self._require(Step.FEEDBACK)
            if self.current_index + 1 < len(self.questions):
                self.current_index += 1
                self.draft_transcript = ""
                self.step = Step.QUESTION
                return
            if self.session_id is not None:
                self.sessions.complete(self.session_id)
            self.step = Step.FINAL
            logger.info("[SESSION] finished with aggregate %s", self.aggregate_score)

    def reset(self):
        """Start a new session from scratch."""
        with self._operation("reset"):
            if self.session_id is not None and self.step != Step.FINAL:
                self.sessions.complete(self.session_id)
            self._clear()

    # -- views ----------------------------------------------------------

    @property
    def current_question(self) -> Optional[Question]:
        if self.step not in (Step.QUESTION, Step.FEEDBACK) or not self.questions:
            return None
        return self.questions[self.current_index]

    @property
    def aggregate_score(self) -> Optional[int]:
        return aggregate_score(r.overall_score for r in self.results)

    def summary(self) -> dict:
        return FeedbackService.build_summary(self.results)

    def snapshot(self) -> dict:
        current = self.current_question
        return {
            "owner_id": self.owner_id,
            "step": self.step.value,
            "busy": self.busy,
            "last_error": self.last_error,
            "principles": [p.to_wire() for p in self.principles],
            "focus_principle": self.focus_principle,
            "used_fallback_questions": self.used_fallback,
            "question_index": self.current_index,
            "total_questions": len(self.questions),
            "current_question": current.to_wire() if current else None,
            "draft_transcript": self.draft_transcript,
            "results": [r.to_dict() for r in self.results],
            "aggregate_score": self.aggregate_score,
            "session_id": self.session_id,
        }


class SessionRegistry:
    """One controller per owner id."""

    def __init__(self, factory: Callable[[str, list], InterviewSessionController]):
        self._factory = factory
        self._controllers = {}
        self._listeners = []
        self._lock = threading.Lock()

    def add_listener(self, listener: Callable):
        self._listeners.append(listener)

    def get(self, owner_id: str) -> InterviewSessionController:
        with self._lock:
            controller = self._controllers.get(owner_id)
            if controller is None:
                controller = self._factory(owner_id, self._listeners)
                self._controllers[owner_id] = controller
            return controller
