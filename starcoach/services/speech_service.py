# speech_service.py
"""Speech-to-Text for recorded answers.

The session pipeline only ever sees the transcript string; anything with a
``transcribe(audio_bytes, filename_hint)`` method can replace this service.
"""

import base64
import binascii
import logging
from typing import Optional

from google.cloud import speech_v2

from config import settings
from services.errors import UpstreamTransportError, ValidationError

logger = logging.getLogger(__name__)


def detect_audio_signature_prefix(b: bytes) -> str:
    if not b:
        return "empty"
    head = b[:64]
    if head.startswith(b"data:"):
        return "data-uri"
    if head.startswith(b"ID3") or head[:2] in (b"\xff\xfb", b"\xff\xf3", b"\xff\xf2"):
        return "mp3"
    if head[:4] == b"RIFF":
        return "wav"
    if head[:4] == b"OggS":
        return "ogg"
    if b"OpusHead" in head:
        return "opus"
    if b"\x1A\x45\xDF\xA3" in head:
        return "webm"
    if b"ftyp" in head:
        return "mp4"
    return "unknown"


def decode_data_uri(b: bytes) -> bytes:
    """Browsers sometimes post a base64 data URI instead of the raw blob."""
    try:
        _, b64 = b.split(b",", 1)
        return base64.b64decode(b64)
    except (ValueError, binascii.Error) as e:
        raise ValidationError(f"Invalid audio data URI: {e}", "transcribe") from e


def looks_like_noise(text: str) -> bool:
    """Spelled-letter transcripts like "s u b o d h" come from silence or clipping."""
    if len(text) < 3:
        return True
    toks = text.strip().split()
    single_letters = sum(1 for t in toks if len(t) == 1 and t.isalpha())
    return bool(toks) and single_letters >= max(4, int(0.6 * len(toks)))


class SpeechService:
    """Handles STT through Google Cloud Speech v2."""

    # Maximum raw bytes we'll accept for immediate in-memory STT (avoid huge payloads)
    MAX_IN_MEMORY_BYTES = 10 * 1024 * 1024

    def __init__(self, project_id: str = None, language: str = None, client=None):
        self.project_id = project_id or settings.PROJECT_ID
        self.language = language or settings.LANG_STT
        self._client = client

    def _get_client(self):
        if self._client is None:
            self._client = speech_v2.SpeechClient()
        return self._client

    def transcribe(self, audio_bytes: bytes, filename_hint: Optional[str] = None) -> str:
        """Transcribe audio bytes to text.

        Returns the trimmed transcript, or "" when the recognizer heard nothing usable.
        """
        sig = detect_audio_signature_prefix(audio_bytes)
        logger.info("[STT] signature=%s filename_hint=%s size=%d", sig, filename_hint, len(audio_bytes or b""))
        if sig == "empty":
            raise ValidationError("Empty audio upload.", "transcribe")
        if sig == "data-uri":
            audio_bytes = decode_data_uri(audio_bytes)

        if len(audio_bytes) > self.MAX_IN_MEMORY_BYTES:
            raise ValidationError("Recording too long for synchronous transcription.", "transcribe")
        if not self.project_id:
            raise UpstreamTransportError("Speech-to-text needs GOOGLE_CLOUD_PROJECT.", "transcribe")

        config = speech_v2.RecognitionConfig(
            auto_decoding_config=speech_v2.AutoDetectDecodingConfig(),
            language_codes=[self.language],
            model="long",
            features=speech_v2.RecognitionFeatures(enable_automatic_punctuation=True),
        )
        req = speech_v2.RecognizeRequest(
            recognizer=f"projects/{self.project_id}/locations/global/recognizers/_",
            config=config,
            content=audio_bytes,
        )

        try:
            stt_resp = self._get_client().recognize(request=req)
        except Exception as e:
            logger.exception("[STT] API error")
            raise UpstreamTransportError(f"Speech-to-text request failed: {e}", "transcribe") from e

        parts = [
            r.alternatives[0].transcript.strip()
            for r in stt_resp.results
            if r.alternatives and r.alternatives[0].transcript.strip()
        ]
        transcript = " ".join(parts)
        if looks_like_noise(transcript):
            logger.info("[STT] no usable speech detected")
            return ""
        return transcript
