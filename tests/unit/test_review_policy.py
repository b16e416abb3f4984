"""Unit tests for review request construction."""

from __future__ import annotations

from collections.abc import Callable

from cultural_chunker.config.domain_knowledge import REVIEW_POLICIES
from cultural_chunker.models.chunk import Chunk, SensitivityTier
from cultural_chunker.models.pipeline import ReviewPriority
from cultural_chunker.services.review_policy import build_review_request, recommendations_for

MakeChunk = Callable[..., Chunk]


class TestBuildReviewRequest:
    def test_public_chunk_needs_no_review(self, make_chunk: MakeChunk) -> None:
        assert build_review_request(make_chunk(0)) is None

    def test_community(self, make_chunk: MakeChunk) -> None:
        request = build_review_request(make_chunk(0, tier=SensitivityTier.COMMUNITY))

        assert request is not None
        assert request.priority == ReviewPriority.MEDIUM
        assert request.estimated_review_hours == 8
        assert request.escalation_required is False

    def test_restricted(self, make_chunk: MakeChunk) -> None:
        request = build_review_request(make_chunk(2, tier=SensitivityTier.RESTRICTED))

        assert request is not None
        assert request.chunk_id == "chunk-2"
        assert request.chunk_index == 2
        assert request.priority == ReviewPriority.HIGH
        assert request.estimated_review_hours == 24
        assert request.escalation_required is True
        assert request.recommendations == list(
            REVIEW_POLICIES[SensitivityTier.RESTRICTED].recommendations
        )

    def test_sacred(self, make_chunk: MakeChunk) -> None:
        chunk = make_chunk(0, tier=SensitivityTier.SACRED, requires_elder_review=True)
        request = build_review_request(chunk)

        assert request is not None
        assert request.priority == ReviewPriority.URGENT
        assert request.estimated_review_hours == 72
        assert request.requires_elder_review is True
        assert request.escalation_required is True

    def test_chunk_with_warnings_is_always_queued(self, make_chunk: MakeChunk) -> None:
        chunk = make_chunk(0, warnings=["[classification] boom"])
        request = build_review_request(chunk)

        assert request is not None
        assert request.priority == ReviewPriority.MEDIUM
        assert "[classification] boom" in request.flags
        assert any("manual cultural review" in r for r in request.recommendations)


class TestRecommendations:
    def test_public_has_none(self) -> None:
        assert recommendations_for(SensitivityTier.PUBLIC) == []

    def test_sacred_mentions_elder_approval(self) -> None:
        assert any("elder approval" in r for r in recommendations_for(SensitivityTier.SACRED))

    def test_returns_a_copy(self) -> None:
        recs = recommendations_for(SensitivityTier.COMMUNITY)
        recs.append("mutated")
        assert "mutated" not in recommendations_for(SensitivityTier.COMMUNITY)
