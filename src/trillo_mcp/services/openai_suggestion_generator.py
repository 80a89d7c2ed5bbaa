"""
OpenAI-compatible task suggestion generator.

Calls ``{base_url}/chat/completions`` in JSON mode and parses the
assistant's ``{"suggestions": [...]}`` document into ``TaskSuggestion``
objects. Transport problems raise ``TaskGenerationUnavailableError``;
a malformed document raises ``InvalidTaskSuggestionsError``.
"""

import json
import logging
from typing import Any, Dict, List, Optional

import httpx

from trillo_mcp.config import LLMSettings
from trillo_mcp.domain.entities.task_suggestion import TaskSuggestion, TaskSuggestionContext
from trillo_mcp.domain.errors import InvalidTaskSuggestionsError, TaskGenerationUnavailableError
from trillo_mcp.domain.task_types import TASK_PRIORITIES

logger = logging.getLogger(__name__)

SUGGESTION_TASK_TYPES = ("task", "epic")

SYSTEM_PROMPT = (
    "You generate project task suggestions. Output must be valid JSON with shape "
    '{"suggestions":[...]}. Always write suggestions in English. Maximum 3 suggestions. '
    "Each suggestion must contain: suggestionId, title, description, category, "
    "priority (low|medium|high), taskType (task|epic), epicSuggestionId (string|null). "
    "epics must have epicSuggestionId as null. task suggestions may reference an epic "
    "suggestionId from the same response."
)


class OpenAiTaskSuggestionGenerator:
    """Task suggestion generator backed by an OpenAI-compatible chat API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
        timeout_seconds: float = 20.0,
        client: Optional[httpx.Client] = None,
    ):
        base_url = (base_url or "").strip().rstrip("/")
        api_key = (api_key or "").strip()
        model = (model or "").strip()

        if not base_url:
            raise ValueError("LLM_API_BASE_URL must not be empty.")
        if not api_key:
            raise ValueError("LLM_API_KEY must not be empty.")
        if not model:
            raise ValueError("LLM_API_MODEL must not be empty.")

        self.base_url = base_url
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self._client = client or httpx.Client(timeout=timeout_seconds)

    @classmethod
    def from_settings(cls, settings: LLMSettings) -> "OpenAiTaskSuggestionGenerator":
        return cls(
            base_url=settings.api_base_url,
            api_key=settings.api_key or "",
            model=settings.model,
            timeout_seconds=settings.timeout_seconds,
        )

    def _build_request(self, context: TaskSuggestionContext) -> Dict[str, Any]:
        user_payload = {
            "projectId": context.project_id,
            "projectName": context.project_name,
            "projectDescription": context.project_description,
            "limit": context.limit,
            "existingTasks": [
                {
                    "id": task.id,
                    "title": task.title,
                    "category": task.category,
                    "priority": task.priority,
                    "status": task.status,
                    "taskType": task.task_type,
                    "epicId": task.epic_id,
                }
                for task in context.existing_tasks
            ],
        }
        return {
            "model": self.model,
            "temperature": 0.2,
            "response_format": {"type": "json_object"},
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": json.dumps(user_payload)},
            ],
        }

    def generate_suggestions(self, context: TaskSuggestionContext) -> List[TaskSuggestion]:
        """Ask the provider for suggestions about ``context``'s project."""
        try:
            response = self._client.post(
                f"{self.base_url}/chat/completions",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=self._build_request(context),
                timeout=self.timeout_seconds,
            )
        except httpx.HTTPError as e:
            logger.warning("Task suggestion provider request failed: %s", e)
            raise TaskGenerationUnavailableError() from e

        if response.is_error:
            raise TaskGenerationUnavailableError(
                f"Task suggestion provider responded with status {response.status_code}."
            )

        try:
            payload = response.json()
        except ValueError:
            payload = None

        content = extract_assistant_content(payload)
        if not content:
            raise TaskGenerationUnavailableError(
                "Task suggestion provider returned an empty response."
            )

        return parse_suggestions(content)

    def close(self) -> None:
        self._client.close()


def extract_assistant_content(payload: Any) -> Optional[str]:
    """Pull the first choice's message content; joins text parts when it is a list."""
    if not isinstance(payload, dict):
        return None

    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None

    message = choices[0].get("message")
    content = message.get("content") if isinstance(message, dict) else None

    if isinstance(content, str):
        return content

    if isinstance(content, list):
        text = "".join(
            part["text"]
            for part in content
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        ).strip()
        return text or None

    return None


def parse_suggestions(raw_content: str) -> List[TaskSuggestion]:
    try:
        parsed = json.loads(raw_content)
    except ValueError as e:
        raise InvalidTaskSuggestionsError("Task suggestion response must be valid JSON.") from e

    if not isinstance(parsed, dict):
        raise InvalidTaskSuggestionsError("Task suggestion response must be a JSON object.")

    suggestions = parsed.get("suggestions")
    if not isinstance(suggestions, list):
        raise InvalidTaskSuggestionsError(
            "Task suggestion response must contain a suggestions array."
        )

    return [_parse_suggestion(item, index) for index, item in enumerate(suggestions)]


def _parse_suggestion(item: Any, index: int) -> TaskSuggestion:
    if not isinstance(item, dict):
        raise InvalidTaskSuggestionsError(f"suggestions[{index}] must be an object.")

    prefix = f"suggestions[{index}]"
    return TaskSuggestion(
        suggestion_id=_required_string(item.get("suggestionId"), f"{prefix}.suggestionId"),
        title=_required_string(item.get("title"), f"{prefix}.title"),
        category=_required_string(item.get("category"), f"{prefix}.category"),
        description=_nullable_string(item.get("description"), f"{prefix}.description"),
        priority=_choice(item.get("priority"), TASK_PRIORITIES, f"{prefix}.priority"),
        task_type=_choice(item.get("taskType"), SUGGESTION_TASK_TYPES, f"{prefix}.taskType"),
        epic_suggestion_id=_nullable_string(
            item.get("epicSuggestionId"), f"{prefix}.epicSuggestionId"
        ),
    )


def _required_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise InvalidTaskSuggestionsError(f"{field_name} must be a string.")
    value = value.strip()
    if not value:
        raise InvalidTaskSuggestionsError(f"{field_name} must not be empty.")
    return value


def _nullable_string(value: Any, field_name: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidTaskSuggestionsError(f"{field_name} must be a string or null.")
    return value.strip() or None


def _choice(value: Any, allowed: tuple, field_name: str) -> str:
    if not isinstance(value, str) or value not in allowed:
        raise InvalidTaskSuggestionsError(f"{field_name} must be one of: {', '.join(allowed)}.")
    return value
