import pytest

from conftest import RESUME
from services.errors import MalformedResponseError, UpstreamTransportError, ValidationError
from services.resume_condenser import ResumeCondenser, truncate_words, word_count

QUESTION = "Tell me about a time you put the customer first."


def test_prompt_carries_question_and_principle(generator):
    condensed = ResumeCondenser(generator).condense(RESUME, QUESTION, "Customer Obsession")

    assert condensed.startswith("Senior PM")
    call = generator.calls[0]
    assert call["stage"] == "condense"
    assert call["json_mode"] is False
    assert QUESTION in call["user_prompt"]
    assert "Leadership Principle: Customer Obsession" in call["user_prompt"]
    assert "3000 words" in call["user_prompt"]


def test_missing_principle_is_marked_not_specified(generator):
    ResumeCondenser(generator).condense(RESUME, QUESTION)
    assert "Leadership Principle: Not specified" in generator.calls[0]["user_prompt"]


def test_overlong_output_is_truncated_to_cap(generator):
    long_resume = " ".join(f"word{i}" for i in range(10000))
    generator.queue("condense", long_resume)

    condensed = ResumeCondenser(generator, max_words=3000).condense(long_resume, QUESTION, "Ownership")

    assert word_count(condensed) == 3000
    assert condensed.endswith("word2999")


def test_output_under_cap_is_untouched(generator):
    generator.queue("condense", "Line one.\n\nLine two with 40% growth.")
    condensed = ResumeCondenser(generator, max_words=3000).condense(RESUME, QUESTION)
    assert condensed == "Line one.\n\nLine two with 40% growth."


def test_blank_output_fails(generator):
    generator.queue("condense", "   ")
    with pytest.raises(MalformedResponseError):
        ResumeCondenser(generator).condense(RESUME, QUESTION)


def test_transport_error_is_not_swallowed(generator):
    generator.queue("condense", UpstreamTransportError("timeout", "condense"))
    with pytest.raises(UpstreamTransportError):
        ResumeCondenser(generator).condense(RESUME, QUESTION)
    assert generator.count("condense") == 1


@pytest.mark.parametrize("resume,question", [("", QUESTION), (RESUME, " ")])
def test_required_inputs(generator, resume, question):
    with pytest.raises(ValidationError):
        ResumeCondenser(generator).condense(resume, question)
    assert generator.count() == 0


def test_truncate_words_keeps_spacing():
    assert truncate_words("a  b\nc d", 3) == "a  b\nc"
    assert truncate_words("a b", 5) == "a b"
