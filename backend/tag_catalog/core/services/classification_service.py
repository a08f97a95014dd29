from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any, Literal

from pydantic import TypeAdapter, ValidationError

from tag_catalog.core.schemas.classification import ClassificationResult
from tag_catalog.core.services.taxonomy_service import (
    category_count,
    labelled_category_list,
    normalize_category,
    numbered_category_list,
)
from tag_catalog.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from openai import AsyncOpenAI  # type: ignore[import-not-found]

    from tag_catalog.config import Settings
    from tag_catalog.core.models.tag import TagCategory


logger = get_logger(__name__)

AnswerFormat = Literal["index", "label"]

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)

_PAYLOAD_ADAPTER: TypeAdapter[dict[str, Any]] = TypeAdapter(dict[str, Any])

EXAMPLE_TAGS = ["heavy metal", "slow build up", "80s"]


class ClassifierResponseError(ValueError):
    """The classifier answered, but not with a JSON object."""


def build_instructions(answer_format: AnswerFormat = "index") -> str:
    """System instructions describing the taxonomy and the expected answer shape."""
    if answer_format == "label":
        example = {
            "heavy metal": "Core Genre Family",
            "slow build up": "Rhythmic & Structural Traits",
            "80s": "Era / Time-Period Vibe",
        }
        return (
            "You are an expert musicologist. Your task is to categorize musical tags from a list.\n"
            "Respond with a valid JSON object where keys are the original tags and values are "
            "the corresponding category NAME from the list below.\n\n"
            "CATEGORIES:\n" + labelled_category_list() + "\n\n"
            "RULES:\n"
            "- The value for each tag MUST be copied exactly from the category list.\n"
            "- Do NOT include any extra text, comments, or markdown formatting like ```json.\n\n"
            "Example Input: " + json.dumps(EXAMPLE_TAGS) + "\n"
            "Example JSON Output:\n" + json.dumps(example, indent=2)
        )

    example = {"heavy metal": 3, "slow build up": 9, "80s": 2}
    return (
        "You are an expert musicologist. Your task is to categorize musical tags from a list.\n"
        "Respond with a valid JSON object where keys are the original tags and values are "
        "the corresponding category NUMBER from the list below.\n\n"
        "CATEGORIES:\n" + numbered_category_list() + "\n\n"
        "RULES:\n"
        f"- The value for each tag MUST be an integer between 1 and {category_count()}.\n"
        "- Do NOT use the category name, only the number.\n"
        "- Do NOT include any extra text, comments, or markdown formatting like ```json.\n\n"
        "Example Input: " + json.dumps(EXAMPLE_TAGS) + "\n"
        "Example JSON Output:\n" + json.dumps(example, indent=2)
    )


def build_user_input(tags: Sequence[str]) -> str:
    return "Now, categorize the following tags:\n" + json.dumps(list(tags), ensure_ascii=False)


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences the model wraps around JSON despite instructions."""
    return _FENCE_RE.sub("", text or "").strip()


def parse_classifier_payload(text: str) -> dict[str, Any]:
    """Parse the classifier's answer into a tag -> raw value dict.

    Tolerates fences and stray prose around the object. Raises
    ClassifierResponseError when no JSON object can be recovered.
    """
    cleaned = strip_code_fences(text)
    if not cleaned:
        raise ClassifierResponseError("Classifier returned an empty response")

    try:
        return _PAYLOAD_ADAPTER.validate_json(cleaned)
    except ValidationError as err:
        start, end = cleaned.find("{"), cleaned.rfind("}")
        if start == -1 or end <= start:
            raise ClassifierResponseError(
                f"Classifier response contains no JSON object: {err.errors()[0]['msg']}"
            ) from err

    try:
        return _PAYLOAD_ADAPTER.validate_json(cleaned[start:end + 1])
    except ValidationError as err:
        raise ClassifierResponseError(
            f"Classifier response is not a valid JSON object: {err.errors()[0]['msg']}"
        ) from err


class TagClassifier:
    """Assigns taxonomy categories to tags with one OpenAI call per batch.

    Failure containment lives here: whatever goes wrong with the call or its
    output, `classify` returns a fallback result instead of raising.
    """

    def __init__(
        self,
        openai_client: AsyncOpenAI,
        *,
        model: str,
        answer_format: AnswerFormat = "index",
        reasoning_effort: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self._client = openai_client
        self._model = model
        self._answer_format = answer_format
        self._reasoning_effort = reasoning_effort
        self._timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, openai_client: AsyncOpenAI, app_settings: Settings) -> TagClassifier:
        return cls(
            openai_client,
            model=app_settings.classifier_model,
            answer_format=app_settings.classifier_answer_format,
            reasoning_effort=app_settings.classifier_model_reasoning,
            timeout_seconds=app_settings.classifier_timeout_seconds,
        )

    def _build_request_kwargs(self, tags: Sequence[str]) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "model": self._model,
            "input": [
                {
                    "role": "system",
                    "content": build_instructions(self._answer_format),
                },
                {
                    "role": "user",
                    "content": build_user_input(tags),
                },
            ],
        }
        if self._reasoning_effort:
            kwargs["reasoning"] = {"effort": self._reasoning_effort}
        if self._timeout_seconds is not None:
            kwargs["timeout"] = self._timeout_seconds
        return kwargs

    async def _request(self, tags: Sequence[str]) -> str:
        response = await self._client.responses.create(**self._build_request_kwargs(tags))
        return getattr(response, "output_text", None) or ""

    async def classify(self, tags: Sequence[str]) -> ClassificationResult:
        """Map each tag to a taxonomy category.

        An empty batch returns an empty OK result without touching the network.
        """
        tag_list = list(tags)
        if not tag_list:
            return ClassificationResult.ok({})

        logger.info("Sending %d tags to the classifier (model=%s, format=%s)",
                    len(tag_list), self._model, self._answer_format)

        try:
            text = await self._request(tag_list)
            payload = parse_classifier_payload(text)
        except Exception as err:  # network, timeout, API and parse errors alike
            logger.error("Tag classification failed, falling back to default category: %s", err)
            logger.error("Error type: %s", type(err).__name__)
            return ClassificationResult.fallback(tag_list, error=f"{type(err).__name__}: {err}")

        requested = set(tag_list)
        unexpected = [k for k in payload if k not in requested]
        if unexpected:
            logger.debug("Classifier returned %d unrequested keys: %s", len(unexpected), unexpected[:20])

        categories: dict[str, TagCategory] = {
            tag: normalize_category(payload.get(tag)) for tag in tag_list
        }
        missing = len(requested - payload.keys())
        if missing:
            logger.warning("Classifier omitted %d of %d tags; they default to the fallback category",
                           missing, len(tag_list))

        logger.info("Successfully categorized and normalized %d tags", len(categories))
        return ClassificationResult.ok(categories)
