"""Test configuration and fixtures."""

import pytest


# Configure pytest-asyncio
pytest_plugins = ['pytest_asyncio']


def build_text(topic: str, words: int, start: int = 0) -> str:
    """Deterministic text of distinct significant words for a topic."""
    return " ".join(f"{topic}{i:05d}" for i in range(start, start + words))


@pytest.fixture
def make_text():
    """Factory for deterministic source content."""
    return build_text


@pytest.fixture
def web_row():
    """Factory for raw web source rows."""
    def _make(source_id: str, content: str, **overrides):
        row = {
            "id": source_id,
            "source_type": "web",
            "source_title": f"Web {source_id}",
            "source_url": f"https://example.com/{source_id}",
            "source_content": content,
            "is_starred": True,
            "fact_check_status": "user-provided",
        }
        row.update(overrides)
        return row
    return _make


@pytest.fixture
def document_row():
    """Factory for user document rows as the document producer sends them."""
    def _make(source_id: str, content: str, **overrides):
        row = {
            "id": source_id,
            "source_type": "document",
            "source_title": f"Document {source_id}",
            "source_content": content,
        }
        row.update(overrides)
        return row
    return _make
