"""Pytest configuration and shared fixtures."""
import pytest

from learning_ai.config import reset_settings


@pytest.fixture(autouse=True)
def _clean_settings():
    """Drop any cached Settings between tests."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def chat_client(mocker):
    """A mock OpenAI client; tests set chat.completions.create behaviour."""
    return mocker.Mock()


@pytest.fixture
def lesson_text():
    """A short multi-sentence lesson on photosynthesis."""
    return (
        "Photosynthesis is the process plants use to convert light energy into chemical energy. "
        "Chlorophyll in the chloroplasts absorbs sunlight, mostly blue and red wavelengths. "
        "Carbon dioxide and water are combined to produce glucose and release oxygen. "
        "The light-dependent reactions happen in the thylakoid membranes. "
        "The Calvin cycle uses ATP and NADPH to fix carbon into sugars."
    )
