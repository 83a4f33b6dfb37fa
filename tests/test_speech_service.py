import base64
from types import SimpleNamespace

import pytest

from services.errors import UpstreamTransportError, ValidationError
from services.speech_service import SpeechService, detect_audio_signature_prefix, looks_like_noise


@pytest.mark.parametrize("sample,expected", [
    (b"", "empty"),
    (b"ID3\x03\x00", "mp3"),
    (b"RIFF\x00\x00\x00\x00WAVE", "wav"),
    (b"OggS\x00\x02", "ogg"),
    (b"OpusHead\x01", "opus"),
    (b"data:audio/mp3;base64,AAA", "data-uri"),
    (b"\x1a\x45\xdf\xa3webm", "webm"),
    (b"hello", "unknown"),
])
def test_signature_sniffing(sample, expected):
    assert detect_audio_signature_prefix(sample) == expected


@pytest.mark.parametrize("text,noise", [
    ("", True),
    ("ok", True),
    ("s u b o d h", True),
    ("I led the launch of our mobile app", False),
])
def test_noise_detection(text, noise):
    assert looks_like_noise(text) is noise


class FakeSpeechClient:
    def __init__(self, transcripts=None, error=None):
        self.transcripts = transcripts or []
        self.error = error
        self.requests = []

    def recognize(self, request):
        self.requests.append(request)
        if self.error:
            raise self.error
        return SimpleNamespace(results=[
            SimpleNamespace(alternatives=[SimpleNamespace(transcript=t)]) for t in self.transcripts
        ])


def test_transcribe_joins_results():
    client = FakeSpeechClient(["I led the launch.", " Revenue grew forty percent. "])
    service = SpeechService(project_id="demo", language="en-US", client=client)

    text = service.transcribe(b"OggS\x00\x02audio", filename_hint="answer.ogg")

    assert text == "I led the launch. Revenue grew forty percent."
    assert client.requests[0].recognizer == "projects/demo/locations/global/recognizers/_"


def test_data_uri_is_decoded():
    client = FakeSpeechClient(["I handled the escalation myself."])
    service = SpeechService(project_id="demo", client=client)
    payload = b"data:audio/webm;base64," + base64.b64encode(b"\x1a\x45\xdf\xa3raw")

    service.transcribe(payload)

    assert client.requests[0].content == b"\x1a\x45\xdf\xa3raw"


def test_silence_gives_empty_transcript():
    service = SpeechService(project_id="demo", client=FakeSpeechClient(["a b c d e"]))
    assert service.transcribe(b"RIFF....WAVE") == ""


def test_empty_audio_is_rejected():
    with pytest.raises(ValidationError):
        SpeechService(project_id="demo", client=FakeSpeechClient()).transcribe(b"")


def test_api_failure_is_transport_error():
    service = SpeechService(project_id="demo", client=FakeSpeechClient(error=RuntimeError("quota")))
    with pytest.raises(UpstreamTransportError):
        service.transcribe(b"RIFF....WAVE")
