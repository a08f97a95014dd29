"""Shared pytest fixtures for the tag catalog tests."""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from tag_catalog.config import Settings
from tag_catalog.core.repositories.implementations.sqlite.tag_repository import SqliteTagRepository
from tag_catalog.core.services.classification_service import TagClassifier


# =============================================================================
# Mock Factories - Create configurable mocks for external dependencies
# =============================================================================

def requested_tags(call_kwargs: dict) -> list[str]:
    """Recover the tag batch from the kwargs of a responses.create call."""
    user_content = call_kwargs["input"][1]["content"]
    return json.loads(user_content.split("\n", 1)[1])


def create_mock_openai_client(
    output_text: str | None = None,
    answers: dict[str, object] | None = None,
    error: BaseException | None = None,
) -> MagicMock:
    """Create a mock AsyncOpenAI client exposing ``responses.create``.

    Args:
        output_text: Fixed response text returned for every call
        answers: Per-tag raw answers; the reply is built from the requested
            batch, unknown tags answer 13
        error: Exception raised by every call instead of answering

    Returns:
        Mock client that can be used in place of AsyncOpenAI
    """
    mock_client = MagicMock()

    if error is not None:
        mock_client.responses.create = AsyncMock(side_effect=error)
    elif answers is not None:
        async def _answer(**kwargs):
            tags = requested_tags(kwargs)
            payload = {t: answers.get(t, 13) for t in tags}
            return SimpleNamespace(output_text="```json\n" + json.dumps(payload) + "\n```")

        mock_client.responses.create = AsyncMock(side_effect=_answer)
    else:
        mock_client.responses.create = AsyncMock(
            return_value=SimpleNamespace(output_text=output_text or "")
        )

    return mock_client


SCENARIO_ANSWERS = {
    "heavy metal": 3,
    "slow build up": 9,
    "80s": 2,
    "anthem": 7,
}


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "tags.db"


@pytest.fixture
async def sqlite_repo(db_path):
    """Initialized SQLite store in a temporary directory."""
    return await SqliteTagRepository(db_path).initialize()


@pytest.fixture
def openai_client():
    return create_mock_openai_client(answers=SCENARIO_ANSWERS)


@pytest.fixture
def classifier(openai_client):
    return TagClassifier(openai_client, model="test-model")


@pytest.fixture
def test_settings(db_path):
    return Settings(
        _env_file=None,
        sqlite_path=str(db_path),
        storage_backend="sqlite",
        classifier_model="test-model",
    )
