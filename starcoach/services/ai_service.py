"""Gemini text-generation service shared by every prompt stage."""
import json
import logging
import threading
import time
from typing import Optional

from google import genai
from google.genai import errors, types
from google.genai.types import HttpOptions

from config import settings
from services.errors import MalformedResponseError, UpstreamTransportError

logger = logging.getLogger(__name__)


class AIService:
    """Handles AI model interactions.

    One instance is shared by the analyzer, condenser and evaluator. Failures are
    raised, never papered over: there is no automatic retry on transport errors, so a
    duplicate charge or a duplicate write can only come from the user retrying.
    """

    def __init__(self, model: str = None, timeout_sec: int = None, max_calls_per_min: int = None):
        self.model = model or settings.GEMINI_MODEL
        self.timeout_sec = settings.LLM_TIMEOUT_SEC if timeout_sec is None else timeout_sec
        self.max_calls_per_min = (
            settings.LLM_MAX_CALLS_PER_MIN if max_calls_per_min is None else max_calls_per_min
        )
        self._client = None
        self._last_calls = []  # Rate limiting tracker
        self._calls_lock = threading.Lock()

    def _get_client(self):
        if self._client is not None:
            return self._client
        settings.validate_config()
        http_options = HttpOptions(timeout=int(self.timeout_sec * 1000))
        if settings.USE_VERTEX == "1":
            http_options = HttpOptions(api_version="v1", timeout=int(self.timeout_sec * 1000))
            self._client = genai.Client(
                vertexai=True,
                project=settings.PROJECT_ID,
                location=settings.LOCATION,
                http_options=http_options,
            )
            logger.info("[GENAI] Using Vertex AI (v1) via ADC")
        else:
            self._client = genai.Client(api_key=settings.API_KEY, http_options=http_options)
            logger.info("[GENAI] Using AI Studio API key (v1beta)")
        return self._client

    def _allow_call(self) -> bool:
        """Rate limiting check."""
        if not self.max_calls_per_min:
            return True
        with self._calls_lock:
            now = time.time()
            while self._last_calls and now - self._last_calls[0] > 60:
                self._last_calls.pop(0)
            if len(self._last_calls) >= self.max_calls_per_min:
                return False
            self._last_calls.append(now)
            return True

    @staticmethod
    def _debug_response(resp):
        """Debug Gemini response."""
        if not logger.isEnabledFor(logging.DEBUG):
            return
        logger.debug("[GENAI] text len: %d", len(getattr(resp, "text", "") or ""))
        for i, c in enumerate(getattr(resp, "candidates", []) or []):
            logger.debug("[GENAI] candidate[%d].finish_reason: %s", i, getattr(c, "finish_reason", None))
        pf = getattr(resp, "prompt_feedback", None)
        if pf:
            logger.debug("[GENAI] prompt_feedback.block_reason: %s", getattr(pf, "block_reason", None))

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        json_mode: bool = True,
        max_tokens: int = 2000,
        temperature: float = 0.4,
        model: Optional[str] = None,
        stage: str = "llm",
    ) -> str:
        """Run one generation call and return the stripped text.

        Raises UpstreamTransportError for anything that stops the call from completing
        and MalformedResponseError when the model answers with nothing.
        """
        if not self._allow_call():
            raise UpstreamTransportError("Generation rate limit reached, try again in a minute.", stage)

        config = types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=temperature,
            max_output_tokens=max_tokens,
            response_mime_type="application/json" if json_mode else "text/plain",
        )
        model_name = model or self.model
        started = time.time()
        try:
            resp = self._get_client().models.generate_content(
                model=model_name,
                contents=user_prompt,
                config=config,
            )
        except errors.APIError as e:
            code = getattr(e, "code", None)
            logger.error("[GENAI] %s call failed status=%s: %s", stage, code, e)
            if code == 429 or "RESOURCE_EXHAUSTED" in str(e):
                raise UpstreamTransportError("Generation service is rate limiting requests.", stage) from e
            raise UpstreamTransportError(f"Generation service error ({code}): {e}", stage) from e
        except Exception as e:
            logger.error("[GENAI] %s call failed: %r", stage, e)
            raise UpstreamTransportError(f"Generation service unreachable: {e}", stage) from e

        self._debug_response(resp)
        txt = (getattr(resp, "text", "") or "").strip()
        logger.info("[GENAI] %s model=%s chars=%d in %.1fs", stage, model_name, len(txt), time.time() - started)
        if not txt:
            raise MalformedResponseError("Generation service returned empty output.", stage)
        return txt


def parse_json_object(text: str, stage: str) -> dict:
    """Strictly decode a JSON object; anything else is a malformed response."""
    try:
        payload = json.loads(text)
    except (TypeError, ValueError) as e:
        logger.error("[%s] response is not JSON (%d chars)", stage.upper(), len(text or ""))
        raise MalformedResponseError("Generation service returned non-JSON output.", stage) from e
    if not isinstance(payload, dict):
        raise MalformedResponseError("Generation service returned JSON that is not an object.", stage)
    return payload
