"""Lexicon-driven cultural-sensitivity classification for chunk text.

Scans text for traditional-knowledge indicator terms and derives:

* the **sensitivity tier** -- the single highest tier among matched terms
  (never an average; one sacred term makes the chunk sacred no matter how
  much ordinary text surrounds it), ``public`` when nothing matches;
* the **elder-review flag** -- always for sacred content, and for
  restricted content when two or more distinct indicators of any tier
  compound.  Compounding escalates *review* only; the stored tier stays
  ``restricted``;
* human-readable flags and a confidence value for moderators.

The classifier holds no mutable state.  The default lexicon is the
read-only module-level table in
:mod:`cultural_chunker.config.domain_knowledge`, so a single instance can
be shared across worker threads.
"""

from __future__ import annotations

from collections.abc import Mapping

import structlog

from cultural_chunker.config.domain_knowledge import (
    CATEGORY_FLAGS,
    CULTURAL_LEXICON,
    TIER_CONFIDENCE,
    LexiconCategory,
    LexiconEntry,
    build_lexicon_pattern,
    coerce_lexicon,
    find_indicator_terms,
)
from cultural_chunker.models.chunk import SensitivityClassification, SensitivityTier
from cultural_chunker.utils.errors import ClassificationError
from cultural_chunker.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)

# Distinct indicators (any tier) that make restricted content need elder review.
_COMPOUNDING_INDICATORS = 2

# More than this many distinct indicators marks traditional knowledge.
_TRADITIONAL_KNOWLEDGE_INDICATORS = 2

_CATEGORY_ORDER: tuple[LexiconCategory, ...] = (
    LexiconCategory.CEREMONIAL,
    LexiconCategory.PROTOCOL,
    LexiconCategory.HERITAGE,
    LexiconCategory.SENSITIVE,
)


class SensitivityClassifier:
    """Classifies text into a cultural-sensitivity tier.

    Parameters
    ----------
    lexicon:
        Optional custom term → tier (or :class:`LexiconEntry`) mapping that
        replaces the built-in lexicon.  Normalized and frozen once here.
    """

    def __init__(
        self,
        lexicon: Mapping[str, SensitivityTier | LexiconEntry] | None = None,
    ) -> None:
        if lexicon is None:
            self._lexicon: Mapping[str, LexiconEntry] = CULTURAL_LEXICON
            self._pattern = None  # find_indicator_terms uses the precompiled default
        else:
            self._lexicon = coerce_lexicon(lexicon)
            self._pattern = build_lexicon_pattern(self._lexicon)

    @property
    def lexicon(self) -> Mapping[str, LexiconEntry]:
        return self._lexicon

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def classify(self, text: str) -> SensitivityClassification:
        """Classify *text* against the lexicon.

        Parameters
        ----------
        text:
            Chunk text to classify.

        Returns
        -------
        SensitivityClassification
            Tier, elder-review flag, sorted indicator terms, flags and
            confidence.  Identical input always yields identical output.

        Raises
        ------
        ClassificationError
            If *text* is not a string.
        """
        if not isinstance(text, str):
            raise ClassificationError(f"Expected str, got {type(text).__name__}")

        if self._pattern is None and self._lexicon is not CULTURAL_LEXICON:
            # Custom lexicon with no usable terms.
            return self._public()

        matched = find_indicator_terms(text, self._lexicon, self._pattern)
        if not matched:
            return self._public()

        tier = SensitivityTier.highest(entry.tier for entry in matched)
        distinct_terms = {entry.term for entry in matched}
        requires_elder_review = tier == SensitivityTier.SACRED or (
            tier == SensitivityTier.RESTRICTED
            and len(distinct_terms) >= _COMPOUNDING_INDICATORS
        )

        categories = {entry.category for entry in matched}
        flags = [CATEGORY_FLAGS[c] for c in _CATEGORY_ORDER if c in categories]
        if tier == SensitivityTier.RESTRICTED and requires_elder_review:
            flags.append("Multiple cultural indicators on restricted content - elder review required")

        indicators = tuple(sorted(entry.term for entry in matched))
        logger.debug(
            "sensitivity_classified",
            tier=tier.value,
            indicator_count=len(indicators),
            requires_elder_review=requires_elder_review,
        )
        return SensitivityClassification(
            sensitivity_level=tier,
            requires_elder_review=requires_elder_review,
            indicators=indicators,
            flags=flags,
            confidence=TIER_CONFIDENCE[tier],
            contains_traditional_knowledge=len(indicators) > _TRADITIONAL_KNOWLEDGE_INDICATORS,
        )

    @staticmethod
    def _public() -> SensitivityClassification:
        return SensitivityClassification(
            sensitivity_level=SensitivityTier.PUBLIC,
            confidence=TIER_CONFIDENCE[SensitivityTier.PUBLIC],
        )
