"""Question-specific resume condensation (first stage of the feedback chain)."""
import logging
import re

from config import settings
from prompts.system_prompts import CONDENSER_SYSTEM, build_condense_prompt
from services.errors import MalformedResponseError, ValidationError

logger = logging.getLogger(__name__)

_WORD = re.compile(r"\S+")


def word_count(text: str) -> int:
    return len(_WORD.findall(text or ""))


def truncate_words(text: str, max_words: int) -> str:
    """Cut text after max_words words, keeping the original spacing up to the cut."""
    for i, m in enumerate(_WORD.finditer(text)):
        if i == max_words - 1:
            return text[:m.end()]
    return text


class ResumeCondenser:
    """Shrinks a resume to the parts that matter for one question.

    The generator is asked to stay under the cap, but the cap is only advisory to the
    model, so anything longer is truncated here.
    """

    def __init__(self, generator, max_words: int = None, model: str = None):
        self.generator = generator
        self.max_words = max_words or settings.CONDENSED_RESUME_MAX_WORDS
        self.model = model or settings.GEMINI_CONDENSE_MODEL

    def condense(self, resume_text: str, question_text: str, leadership_principle: str = None) -> str:
        if not (resume_text or "").strip():
            raise ValidationError("Resume content is required.", "condense")
        if not (question_text or "").strip():
            raise ValidationError("Question text is required.", "condense")

        prompt = build_condense_prompt(resume_text, question_text, leadership_principle, self.max_words)
        condensed = self.generator.complete(
            CONDENSER_SYSTEM,
            prompt,
            json_mode=False,
            max_tokens=4096,
            temperature=0.3,
            model=self.model,
            stage="condense",
        )
        condensed = (condensed or "").strip()
        if not condensed:
            raise MalformedResponseError("Resume condensation returned nothing.", "condense")

        words = word_count(condensed)
        if words > self.max_words:
            logger.warning("[CONDENSE] output %d words over cap %d, truncating", words, self.max_words)
            condensed = truncate_words(condensed, self.max_words)

        reduction = round((1 - len(condensed) / max(1, len(resume_text))) * 100)
        logger.info("[CONDENSE] resume chars=%d -> %d (reduction %d%%)", len(resume_text), len(condensed), reduction)
        return condensed
