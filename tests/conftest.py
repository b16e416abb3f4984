"""Shared pytest fixtures for the cultural-chunker test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

from cultural_chunker.interfaces.entity_extractor import IEntityExtractor
from cultural_chunker.models.chunk import Chunk, SensitivityTier

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Sample documents
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_document() -> str:
    """A multi-paragraph community report mixing public and cultural content."""
    return (
        "The community health clinic opens every Monday morning. Staff at the "
        "clinic provide vaccinations, check-ups and advice for families living "
        "across the region.\n\n"
        "Elders from the local community shared their kinship knowledge with "
        "younger members during the winter gathering. The elders explained how "
        "kinship connects families to country.\n\n"
        "Some ceremony details are sacred and must not be recorded or shared "
        "outside the initiation grounds. Only those with the right standing may "
        "attend the ceremony.\n\n"
        "The clinic also runs a weekly nutrition program. Families attending the "
        "clinic program receive fresh produce and cooking lessons from local "
        "volunteers.\n\n"
        "Our heritage and culture are celebrated each year at the regional "
        "festival, where storytelling, music and dance bring the community "
        "together."
    )


@pytest.fixture
def example_text() -> str:
    """Three short sentences, one of them sacred."""
    return (
        "Ceremony details are sacred. The clinic opens Monday. "
        "The clinic serves 200 patients weekly."
    )


# ---------------------------------------------------------------------------
# Chunk factory
# ---------------------------------------------------------------------------


@pytest.fixture
def make_chunk() -> Callable[..., Chunk]:
    """Return a factory building classified chunks with predictable ids."""

    def _make(
        index: int,
        text: str = "Placeholder chunk text for testing.",
        keywords: Iterable[str] = (),
        entities: Iterable[str] = (),
        tier: SensitivityTier = SensitivityTier.PUBLIC,
        warnings: Iterable[str] = (),
        requires_elder_review: bool = False,
    ) -> Chunk:
        start = index * 1000
        return Chunk(
            chunk_id=f"chunk-{index}",
            document_id="doc-1",
            index=index,
            start_offset=start,
            end_offset=start + len(text),
            text=text,
            word_count=len(text.split()),
            first_segment=index,
            last_segment=index,
            sensitivity_level=tier,
            requires_elder_review=requires_elder_review,
            keywords=list(keywords),
            entities=tuple(sorted(entities)),
            warnings=list(warnings),
        )

    return _make


# ---------------------------------------------------------------------------
# Fake collaborators
# ---------------------------------------------------------------------------


class FakeEntityExtractor(IEntityExtractor):
    """Returns every known name that appears verbatim in the text."""

    def __init__(self, names: Iterable[str]) -> None:
        self._names = list(names)
        self.calls = 0

    def extract(self, text: str) -> set[str]:
        self.calls += 1
        return {name for name in self._names if name in text}

    def get_provider_name(self) -> str:
        return "fake"


@pytest.fixture
def fake_entity_extractor() -> FakeEntityExtractor:
    return FakeEntityExtractor(["Monday", "clinic"])
