"""Resume + job description analysis: principle ranking and question generation."""
import logging

from pydantic import ValidationError as SchemaError

from config import settings
from models.catalog import principle_titles, resolve_principle
from models.schemas import AnalysisResult
from prompts.system_prompts import ANALYZER_SYSTEM, build_analysis_prompt
from services.ai_service import parse_json_object
from services.errors import MalformedResponseError, ValidationError

logger = logging.getLogger(__name__)


class DocumentAnalyzer:

    def __init__(self, generator, principle_count: int = None, question_count: int = None, model: str = None):
        self.generator = generator
        self.principle_count = principle_count or settings.PRINCIPLE_COUNT
        self.question_count = question_count or settings.QUESTION_COUNT
        self.model = model or settings.GEMINI_ANALYSIS_MODEL

    def analyze(self, resume_text: str, job_description_text: str) -> AnalysisResult:
        if not (resume_text or "").strip():
            raise ValidationError("A resume is required before analysis.", "analyze")
        if not (job_description_text or "").strip():
            raise ValidationError("A job description is required before analysis.", "analyze")

        logger.info("[ANALYZE] resume chars=%d job chars=%d", len(resume_text), len(job_description_text))
        prompt = build_analysis_prompt(resume_text, job_description_text, principle_titles(),
                                       self.principle_count, self.question_count)
        raw = self.generator.complete(
            ANALYZER_SYSTEM,
            prompt,
            json_mode=True,
            max_tokens=4000,
            temperature=0.5,
            model=self.model,
            stage="analyze",
        )
        payload = parse_json_object(raw, "analyze")
        try:
            result = AnalysisResult.model_validate(payload)
        except SchemaError as e:
            logger.error("[ANALYZE] response failed schema validation: %s", e.errors()[:3])
            raise MalformedResponseError("Document analysis was missing required fields.", "analyze") from e

        principles = self._canonical_principles(result.principles)
        questions = self._matching_questions(result.questions, {p.title for p in principles})
        logger.info("[ANALYZE] principles=%s questions=%d",
                    [p.title for p in principles], len(questions))
        return AnalysisResult(principles=principles, questions=questions)

    def _canonical_principles(self, principles):
        seen = set()
        out = []
        for p in principles:
            entry = resolve_principle(p.title)
            if entry is None:
                raise MalformedResponseError(f"Unknown leadership principle: {p.title!r}", "analyze")
            pid, title, description = entry
            if title in seen:
                raise MalformedResponseError(f"Leadership principle listed twice: {title!r}", "analyze")
            seen.add(title)
            out.append(p.model_copy(update={
                "id": pid,
                "title": title,
                "description": p.description or description,
            }))
        if len(out) < self.principle_count:
            raise MalformedResponseError(
                f"Expected {self.principle_count} leadership principles, got {len(out)}.", "analyze"
            )
        out.sort(key=lambda p: p.relevance_score, reverse=True)
        return out[:self.principle_count]

    def _matching_questions(self, questions, titles):
        out = []
        for q in questions:
            entry = resolve_principle(q.principle)
            if entry is None or entry[1] not in titles:
                logger.warning("[ANALYZE] dropping question tagged %r", q.principle)
                continue
            out.append(q.model_copy(update={"principle": entry[1]}))
            if len(out) == self.question_count:
                break
        return [
            q if q.id else q.model_copy(update={"id": f"q{n}"})
            for n, q in enumerate(out, start=1)
        ]
