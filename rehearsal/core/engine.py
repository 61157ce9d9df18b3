import asyncio
import json
import logging
import re
import time
from typing import Any, Dict, List, Protocol

from mistralai import Mistral

from rehearsal.config.settings import settings
from rehearsal.core.models import Transcript
from rehearsal.core.prompts import QUESTION_GENERATION_PROMPT, SCORING_PROMPT, UNANSWERED_MARKER

logger = logging.getLogger(__name__)


class CompletionTransportError(Exception):
    """The completion service could not be reached or refused the request."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedCompletionError(Exception):
    """The completion service answered, but not with the JSON we asked for."""


def is_transient_failure(exc: BaseException) -> bool:
    """Timeouts and transport failures are worth retrying, content failures are not."""
    if isinstance(exc, (asyncio.TimeoutError, ConnectionError)):
        return True
    if isinstance(exc, CompletionTransportError):
        code = exc.status_code
        return code is None or code == 429 or code >= 500
    return False


class QuestionService(Protocol):
    async def generate(self, role: str, company: str, resume_content: str) -> List[str]: ...


class ScoringService(Protocol):
    async def evaluate(self, transcript: Transcript) -> Dict[str, Any]: ...


class CompletionEngine:
    """Question generation and scoring backed by the Mistral chat API.

    Returns the parsed JSON fields as-is. Shape checks are left to the
    gateway and the scoring engine.
    """

    def __init__(self, client: Mistral | None = None, model: str | None = None):
        self.client = client or Mistral(api_key=settings.MISTRAL_API_KEY)
        self.model = model or settings.MISTRAL_MODEL

    def _parse_json_response(self, content: str) -> str | None:
        json_str = None
        if "```json" in content:
            json_str = content.split("```json")[1].split("```")[0].strip()
        elif "```" in content:
            json_str = content.split("```")[1].split("```")[0].strip()
        else:
            json_str = content.strip()

        if not json_str or not json_str.startswith("{"):
            start_idx = content.find("{")
            end_idx = content.rfind("}")
            if start_idx != -1 and end_idx > start_idx:
                json_str = content[start_idx:end_idx + 1]

        return json_str.strip() if json_str else None

    def _extract_json(self, content: str) -> Dict[str, Any]:
        json_str = self._parse_json_response(content)
        if not json_str:
            raise MalformedCompletionError("No JSON object in completion")
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError:
            cleaned = re.sub(r',\s*}', '}', json_str)
            cleaned = re.sub(r',\s*]', ']', cleaned)
            try:
                data = json.loads(cleaned)
            except json.JSONDecodeError as exc:
                raise MalformedCompletionError(f"Invalid JSON in completion: {exc}") from exc
        if not isinstance(data, dict):
            raise MalformedCompletionError("Completion JSON is not an object")
        return data

    @staticmethod
    def _message_text(content: Any) -> str:
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            return "".join(getattr(chunk, "text", "") or "" for chunk in content)
        return ""

    async def _call_llm_async(self, messages: List[Dict[str, Any]]) -> Dict[str, Any]:
        start_time = time.time()
        try:
            response = await asyncio.to_thread(
                self.client.chat.complete,
                model=self.model,
                messages=messages,
                response_format={"type": "json_object"},
            )
        except Exception as exc:  # noqa: BLE001
            raise CompletionTransportError(
                f"Completion request failed: {exc}",
                status_code=getattr(exc, "status_code", None),
            ) from exc

        latency = (time.time() - start_time) * 1000
        usage = getattr(response, "usage", None)
        if usage is not None:
            logger.info(f"Completion done in {latency:.0f}ms, tokens: "
                        f"{usage.prompt_tokens} prompt, {usage.completion_tokens} completion")

        if not response.choices:
            raise MalformedCompletionError("Completion has no choices")
        content = self._message_text(response.choices[0].message.content)
        return self._extract_json(content)

    async def generate(self, role: str, company: str, resume_content: str) -> List[str]:
        messages = [
            {"role": "system", "content": QUESTION_GENERATION_PROMPT},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": f"Role: {role}\nCompany: {company}\nThe resume is attached."},
                    {"type": "document_url", "document_url": resume_content},
                ],
            },
        ]
        data = await self._call_llm_async(messages)
        return data.get("questions")

    def format_transcript(self, transcript: Transcript) -> str:
        lines = [f"Role: {transcript.role}", f"Company: {transcript.company}", ""]
        for index, entry in enumerate(transcript, start=1):
            lines.append(f"Q{index}: {entry.question.text}")
            answer = entry.answer.text if entry.is_answered else UNANSWERED_MARKER
            lines.append(f"A{index}: {answer}")
        return "\n".join(lines)

    async def evaluate(self, transcript: Transcript) -> Dict[str, Any]:
        system_prompt = SCORING_PROMPT.format(score_min=settings.SCORE_MIN, score_max=settings.SCORE_MAX)
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": self.format_transcript(transcript)},
        ]
        return await self._call_llm_async(messages)
