"""Turns classified chunks into moderation queue entries.

Chunks at ``public`` need no review.  Everything above it is queued with a
priority and time estimate taken from the tier's
:class:`~cultural_chunker.config.domain_knowledge.ReviewPolicy`, and
restricted or sacred chunks are escalated to a cultural authority.  A chunk
whose per-chunk processing failed is always queued, whatever its tier,
because its classification is only a conservative placeholder.
"""

from __future__ import annotations

from cultural_chunker.config.domain_knowledge import REVIEW_POLICIES
from cultural_chunker.models.chunk import Chunk, SensitivityTier
from cultural_chunker.models.pipeline import ReviewPriority, ReviewRequest

_ESCALATION_TIERS = frozenset({SensitivityTier.RESTRICTED, SensitivityTier.SACRED})

_MANUAL_REVIEW_RECOMMENDATION = "Automatic analysis failed - manual cultural review required"


def recommendations_for(tier: SensitivityTier) -> list[str]:
    """Handling recommendations for content of *tier*."""
    return list(REVIEW_POLICIES[tier].recommendations)


def build_review_request(chunk: Chunk) -> ReviewRequest | None:
    """Build the review request for *chunk*, or ``None`` if it needs none.

    Args:
        chunk: A classified chunk.

    Returns:
        A :class:`ReviewRequest` for chunks above ``public`` or carrying
        warnings; ``None`` otherwise.
    """
    tier = chunk.sensitivity_level
    if tier == SensitivityTier.PUBLIC and not chunk.warnings:
        return None

    policy = REVIEW_POLICIES[tier]
    recommendations = list(policy.recommendations)
    priority = policy.priority
    if chunk.warnings:
        recommendations.append(_MANUAL_REVIEW_RECOMMENDATION)
        if priority == ReviewPriority.LOW:
            priority = ReviewPriority.MEDIUM

    return ReviewRequest(
        chunk_id=chunk.chunk_id,
        chunk_index=chunk.index,
        sensitivity_level=tier,
        priority=priority,
        estimated_review_hours=policy.estimated_review_hours,
        requires_elder_review=chunk.requires_elder_review,
        escalation_required=tier in _ESCALATION_TIERS,
        recommendations=recommendations,
        flags=list(chunk.sensitivity_flags) + list(chunk.warnings),
    )
