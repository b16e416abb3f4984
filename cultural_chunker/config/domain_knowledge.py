"""Static cultural-safety knowledge: the indicator lexicon and review policies.

# ─── PURPOSE ───────────────────────────────────────────────────────────
#
# This module holds curated reference data used by the sensitivity
# classifier and the review policy:
#
#   - CULTURAL_LEXICON maps every traditional-knowledge indicator term to
#     the sensitivity tier it triggers ("ceremony" → sacred, "kinship" →
#     restricted, "heritage" → community).  Adding a term is a data change;
#     the classifier's control flow never changes.
#   - REVIEW_POLICIES describes what each tier means for access and review
#     (who approves, how long review takes, what to recommend).
#
# Both tables are built once at import time and exposed read-only through
# ``types.MappingProxyType``.  They are never mutated per request, so any
# number of threads can read them without locking.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from cultural_chunker.models.chunk import SensitivityTier
from cultural_chunker.models.pipeline import ReviewPriority


class LexiconCategory(str, Enum):  # noqa: UP042 — StrEnum requires Python 3.11+
    """Why a lexicon term signals cultural content."""

    CEREMONIAL = "ceremonial"   # ceremony, ritual, sacred-site terms
    PROTOCOL = "protocol"       # kinship, protocol, elder / ancestor terms
    HERITAGE = "heritage"       # general cultural-heritage terms
    SENSITIVE = "sensitive"     # sorry business, mourning, the deceased


@dataclass(frozen=True)
class LexiconEntry:
    """One indicator term and the tier it triggers."""

    term: str
    tier: SensitivityTier
    category: LexiconCategory


# ═════════════════════════════════════════════════════════════════════════
# 1. CULTURAL INDICATOR LEXICON
# ═════════════════════════════════════════════════════════════════════════
# Terms are lowercase; multi-word terms match across any whitespace.
# Plural and adjectival forms are listed explicitly rather than stemmed so
# that matching stays predictable for reviewers reading this table.

_CEREMONIAL_TERMS: tuple[str, ...] = (
    "sacred", "sacred site", "sacred sites", "sacred object", "sacred objects",
    "ceremony", "ceremonies", "ceremonial",
    "ritual", "rituals",
    "initiation", "initiations",
    "traditional law",
    "secret", "secret sacred",
    "men only", "women only", "men's business", "women's business",
)

_PROTOCOL_TERMS: tuple[str, ...] = (
    "elder", "elders",
    "ancestor", "ancestors", "ancestral",
    "spiritual",
    "traditional knowledge",
    "cultural protocol", "cultural protocols",
    "cultural practice", "cultural practices",
    "kinship", "skin name", "skin names", "moiety",
    "totem", "totems",
)

_HERITAGE_TERMS: tuple[str, ...] = (
    "traditional", "tradition", "traditions",
    "indigenous", "aboriginal", "torres strait islander", "first nations",
    "native", "tribal",
    "heritage", "customs",
    "cultural", "culture",
    "storytelling", "oral history", "oral tradition",
    "community story", "local knowledge", "cultural context",
)

_SENSITIVE_TERMS: tuple[str, ...] = (
    "sorry business", "deceased", "funeral", "mourning", "grief",
)


def _build_lexicon() -> dict[str, LexiconEntry]:
    lexicon: dict[str, LexiconEntry] = {}
    groups: list[tuple[tuple[str, ...], SensitivityTier, LexiconCategory]] = [
        (_HERITAGE_TERMS, SensitivityTier.COMMUNITY, LexiconCategory.HERITAGE),
        (_SENSITIVE_TERMS, SensitivityTier.COMMUNITY, LexiconCategory.SENSITIVE),
        (_PROTOCOL_TERMS, SensitivityTier.RESTRICTED, LexiconCategory.PROTOCOL),
        (_CEREMONIAL_TERMS, SensitivityTier.SACRED, LexiconCategory.CEREMONIAL),
    ]
    for terms, tier, category in groups:
        for term in terms:
            lexicon[term] = LexiconEntry(term=term, tier=tier, category=category)
    return lexicon


CULTURAL_LEXICON: Mapping[str, LexiconEntry] = MappingProxyType(_build_lexicon())


def normalize_term(term: str) -> str:
    """Canonical lexicon key for *term*: lowercase, single spaces, ASCII apostrophe."""
    return re.sub(r"\s+", " ", term.strip().lower().replace("’", "'"))


def coerce_lexicon(
    lexicon: Mapping[str, SensitivityTier | LexiconEntry],
) -> Mapping[str, LexiconEntry]:
    """Build a read-only lexicon from a caller-supplied mapping.

    Values may be full :class:`LexiconEntry` objects or bare tiers; bare
    tiers get the category conventionally associated with that tier.

    Args:
        lexicon: Term → tier (or entry) mapping.

    Returns:
        An immutable term → :class:`LexiconEntry` mapping with normalized keys.
    """
    default_category = {
        SensitivityTier.PUBLIC: LexiconCategory.HERITAGE,
        SensitivityTier.COMMUNITY: LexiconCategory.HERITAGE,
        SensitivityTier.RESTRICTED: LexiconCategory.PROTOCOL,
        SensitivityTier.SACRED: LexiconCategory.CEREMONIAL,
    }
    entries: dict[str, LexiconEntry] = {}
    for raw_term, value in lexicon.items():
        term = normalize_term(raw_term)
        if not term:
            continue
        if isinstance(value, LexiconEntry):
            entries[term] = LexiconEntry(term=term, tier=value.tier, category=value.category)
        else:
            tier = SensitivityTier(value)
            entries[term] = LexiconEntry(term=term, tier=tier, category=default_category[tier])
    return MappingProxyType(entries)


# ═════════════════════════════════════════════════════════════════════════
# 2. LEXICON MATCHING
# ═════════════════════════════════════════════════════════════════════════
# One alternation per lexicon, longest terms first: at any position the
# longest term wins, so "traditional knowledge" is matched whole before
# "traditional" can match on its own.  Lookarounds enforce word boundaries
# so "elder" never matches inside "elderberry".


def build_lexicon_pattern(terms: Iterable[str]) -> re.Pattern[str] | None:
    """Compile a case-insensitive, longest-first matcher for *terms*.

    Returns ``None`` for an empty term list.
    """
    ordered = sorted({normalize_term(t) for t in terms if t.strip()}, key=lambda t: (-len(t), t))
    if not ordered:
        return None
    alternatives = [
        r"\s+".join(re.escape(word).replace("'", "['’]") for word in term.split(" "))
        for term in ordered
    ]
    return re.compile(r"(?<!\w)(?:" + "|".join(alternatives) + r")(?!\w)", re.IGNORECASE)


_DEFAULT_PATTERN: re.Pattern[str] | None = build_lexicon_pattern(CULTURAL_LEXICON)


def find_indicator_terms(
    text: str,
    lexicon: Mapping[str, LexiconEntry] = CULTURAL_LEXICON,
    pattern: re.Pattern[str] | None = None,
) -> list[LexiconEntry]:
    """Return the lexicon entries matched in *text*, in order of appearance.

    A term matched several times is reported once.

    Args:
        text: Text to scan.
        lexicon: Term → entry mapping; defaults to :data:`CULTURAL_LEXICON`.
        pattern: Precompiled matcher for *lexicon*; compiled on demand when
            omitted for a custom lexicon.

    Returns:
        Distinct matched entries.
    """
    if pattern is None:
        pattern = _DEFAULT_PATTERN if lexicon is CULTURAL_LEXICON else build_lexicon_pattern(lexicon)
    if pattern is None or not text:
        return []

    seen: dict[str, LexiconEntry] = {}
    for match in pattern.finditer(text):
        key = normalize_term(match.group(0))
        entry = lexicon.get(key)
        if entry is not None and key not in seen:
            seen[key] = entry
    return list(seen.values())


# ═════════════════════════════════════════════════════════════════════════
# 3. CATEGORY FLAGS AND TIER CONFIDENCE
# ═════════════════════════════════════════════════════════════════════════

CATEGORY_FLAGS: Mapping[LexiconCategory, str] = MappingProxyType(
    {
        LexiconCategory.CEREMONIAL: "Contains sacred or ceremonial content",
        LexiconCategory.PROTOCOL: "Contains traditional knowledge or cultural protocols",
        LexiconCategory.HERITAGE: "Contains community-specific cultural content",
        LexiconCategory.SENSITIVE: "Contains culturally sensitive content requiring careful handling",
    }
)

TIER_CONFIDENCE: Mapping[SensitivityTier, float] = MappingProxyType(
    {
        SensitivityTier.PUBLIC: 0.7,
        SensitivityTier.COMMUNITY: 0.7,
        SensitivityTier.RESTRICTED: 0.8,
        SensitivityTier.SACRED: 0.9,
    }
)


# ═════════════════════════════════════════════════════════════════════════
# 4. REVIEW POLICIES
# ═════════════════════════════════════════════════════════════════════════
# What each tier means for access and moderation.  Estimated review hours
# reflect who has to be consulted: elders need days, community moderators
# hours.


@dataclass(frozen=True)
class ReviewPolicy:
    """Access and review requirements attached to one sensitivity tier."""

    tier: SensitivityTier
    description: str
    access_rules: tuple[str, ...]
    review_required: bool
    elder_approval_required: bool
    estimated_review_hours: int
    priority: ReviewPriority
    recommendations: tuple[str, ...]


REVIEW_POLICIES: Mapping[SensitivityTier, ReviewPolicy] = MappingProxyType(
    {
        SensitivityTier.PUBLIC: ReviewPolicy(
            tier=SensitivityTier.PUBLIC,
            description="Content safe for general public viewing with no cultural restrictions",
            access_rules=("Available to all users", "No special permissions required"),
            review_required=False,
            elder_approval_required=False,
            estimated_review_hours=2,
            priority=ReviewPriority.LOW,
            recommendations=(),
        ),
        SensitivityTier.COMMUNITY: ReviewPolicy(
            tier=SensitivityTier.COMMUNITY,
            description="Content appropriate for community members with basic cultural context",
            access_rules=(
                "Available to registered community members",
                "Cultural context provided",
            ),
            review_required=True,
            elder_approval_required=False,
            estimated_review_hours=8,
            priority=ReviewPriority.MEDIUM,
            recommendations=(
                "Include cultural context and background information",
                "Ensure community members can provide feedback",
            ),
        ),
        SensitivityTier.RESTRICTED: ReviewPolicy(
            tier=SensitivityTier.RESTRICTED,
            description="Culturally sensitive content requiring special permissions and context",
            access_rules=(
                "Requires specific permissions",
                "Cultural authority approval needed",
                "Limited sharing",
            ),
            review_required=True,
            elder_approval_required=True,
            estimated_review_hours=24,
            priority=ReviewPriority.HIGH,
            recommendations=(
                "Requires cultural authority review",
                "Provide appropriate cultural context when sharing",
                "Limit access to authorized community members",
            ),
        ),
        SensitivityTier.SACRED: ReviewPolicy(
            tier=SensitivityTier.SACRED,
            description="Sacred or highly sensitive cultural content with strict access controls",
            access_rules=(
                "Elder approval required",
                "Ceremony or protocol specific",
                "No sharing without permission",
            ),
            review_required=True,
            elder_approval_required=True,
            estimated_review_hours=72,
            priority=ReviewPriority.URGENT,
            recommendations=(
                "Requires elder approval before any sharing or publication",
                "Must follow traditional protocols for sacred content",
                "Consider if this content should be shared at all",
            ),
        ),
    }
)
