"""STAR scoring of one transcript (second stage of the feedback chain)."""
import logging

from pydantic import ValidationError as SchemaError

from config import settings
from models.schemas import ScoreReport
from prompts.system_prompts import EVALUATION_RETRY_NOTE, EVALUATOR_SYSTEM, build_evaluation_prompt
from services.ai_service import parse_json_object
from services.errors import MalformedResponseError, ValidationError
from services.resume_condenser import word_count

logger = logging.getLogger(__name__)


class ResponseEvaluator:

    def __init__(self, generator, min_suggested_words: int = None, max_attempts: int = None, model: str = None):
        self.generator = generator
        self.min_suggested_words = min_suggested_words or settings.MIN_SUGGESTED_ANSWER_WORDS
        self.max_attempts = max(1, max_attempts or settings.EVAL_MAX_ATTEMPTS)
        self.model = model or settings.GEMINI_EVAL_MODEL

    def evaluate(self, question_text: str, transcript: str, condensed_resume: str,
                 job_description: str, leadership_principle: str) -> ScoreReport:
        """Score a transcript and build the suggested STAR answer.

        Non-JSON or wrongly shaped output fails immediately. The only re-request is for a
        well-formed report whose suggested answer has a thin STAR part, and it happens
        before anything is persisted.
        """
        required = {
            "question": question_text,
            "transcript": transcript,
            "resume": condensed_resume,
            "job description": job_description,
            "leadership principle": leadership_principle,
        }
        missing = [name for name, value in required.items() if not (value or "").strip()]
        if missing:
            raise ValidationError("Missing required content: " + ", ".join(missing), "evaluate")

        prompt = build_evaluation_prompt(question_text, transcript, condensed_resume,
                                         job_description, leadership_principle)
        thin = []
        for attempt in range(1, self.max_attempts + 1):
            user_prompt = prompt
            if attempt > 1:
                user_prompt = prompt + EVALUATION_RETRY_NOTE.format(min_words=self.min_suggested_words)
            raw = self.generator.complete(
                EVALUATOR_SYSTEM,
                user_prompt,
                json_mode=True,
                max_tokens=3000,
                temperature=0.4,
                model=self.model,
                stage="evaluate",
            )
            report = self._parse(raw)
            thin = [name for name, text in report.suggested_answer.components()
                    if word_count(text) < self.min_suggested_words]
            if not thin:
                logger.info("[EVAL] overall=%d attempt=%d", report.overall_score, attempt)
                return report
            logger.warning("[EVAL] thin suggested answer parts %s on attempt %d", thin, attempt)

        raise MalformedResponseError(
            "Suggested answer was incomplete (" + ", ".join(thin) + "). Please try again.", "evaluate"
        )

    @staticmethod
    def _parse(raw: str) -> ScoreReport:
        payload = parse_json_object(raw, "evaluate")
        try:
            return ScoreReport.model_validate(payload)
        except SchemaError as e:
            logger.error("[EVAL] response failed schema validation: %s", e.errors()[:3])
            raise MalformedResponseError("Feedback response was missing required fields.", "evaluate") from e
