from types import SimpleNamespace

import pytest

from conftest import RESUME_URI, session_in_progress
from rehearsal.core.engine import (
    CompletionEngine,
    CompletionTransportError,
    MalformedCompletionError,
    is_transient_failure,
)
from rehearsal.core.prompts import UNANSWERED_MARKER


class FakeChat:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def complete(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(
            choices=[SimpleNamespace(message=message)],
            usage=SimpleNamespace(prompt_tokens=120, completion_tokens=40),
        )


class SDKError(Exception):
    def __init__(self, message, status_code):
        super().__init__(message)
        self.status_code = status_code


def _engine(chat: FakeChat) -> CompletionEngine:
    return CompletionEngine(client=SimpleNamespace(chat=chat), model="test-model")


@pytest.mark.asyncio
async def test_generate_sends_resume_as_document_and_returns_questions():
    chat = FakeChat(content='{"questions": ["Why Acme?", "Tell me about Kafka."]}')

    questions = await _engine(chat).generate("Backend Engineer", "Acme", RESUME_URI)

    assert questions == ["Why Acme?", "Tell me about Kafka."]
    call = chat.calls[0]
    assert call["model"] == "test-model"
    assert call["response_format"] == {"type": "json_object"}
    user_content = call["messages"][1]["content"]
    assert {"type": "document_url", "document_url": RESUME_URI} in user_content
    assert "Backend Engineer" in user_content[0]["text"]


@pytest.mark.asyncio
async def test_fenced_json_with_trailing_commas_is_parsed():
    chat = FakeChat(content='Sure!\n```json\n{"questions": ["One?", "Two?",],}\n```')
    assert await _engine(chat).generate("Backend Engineer", "Acme", RESUME_URI) == ["One?", "Two?"]


@pytest.mark.asyncio
async def test_missing_questions_key_returns_none():
    chat = FakeChat(content='{"items": []}')
    assert await _engine(chat).generate("Backend Engineer", "Acme", RESUME_URI) is None


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["I cannot help with that.", '["a", "b"]', '{"questions": [unquoted]}'])
async def test_non_object_content_is_malformed(content):
    with pytest.raises(MalformedCompletionError):
        await _engine(FakeChat(content=content)).generate("Backend Engineer", "Acme", RESUME_URI)


@pytest.mark.asyncio
async def test_client_errors_become_transport_errors_with_status():
    chat = FakeChat(error=SDKError("Service unavailable", status_code=503))

    with pytest.raises(CompletionTransportError) as exc_info:
        await _engine(chat).generate("Backend Engineer", "Acme", RESUME_URI)

    assert exc_info.value.status_code == 503
    assert is_transient_failure(exc_info.value)


@pytest.mark.asyncio
async def test_evaluate_formats_transcript_with_unanswered_marker():
    session = session_in_progress("Describe an incident.", "How do you test?")
    session.submit_answer("q1", "A cache stampede during a launch.")
    chat = FakeChat(content='{"confidence": 60, "correctness": 55, "depthOfKnowledge": 50, "roleFit": 70}')

    result = await _engine(chat).evaluate(session.transcript())

    assert result["roleFit"] == 70
    prompt = chat.calls[0]["messages"][1]["content"]
    assert "A1: A cache stampede during a launch." in prompt
    assert f"A2: {UNANSWERED_MARKER}" in prompt
    assert "Company: Acme" in prompt


def test_chunked_message_content_is_joined():
    chunks = [SimpleNamespace(text='{"a": '), SimpleNamespace(text="1}")]
    assert CompletionEngine._message_text(chunks) == '{"a": 1}'
