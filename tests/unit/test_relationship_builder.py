"""Unit tests for the RelationshipBuilder -- pairwise chunk links."""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable

import pytest

from cultural_chunker.models.chunk import Chunk
from cultural_chunker.models.relationship import RelationshipType
from cultural_chunker.services.relationship_builder import (
    RelationshipBuilder,
    cosine_similarity,
    jaccard,
)

MakeChunk = Callable[..., Chunk]


def _keyword_builder(**kwargs) -> RelationshipBuilder:
    """Builder with semantic links off so only keyword / entity links appear."""
    return RelationshipBuilder(semantic_threshold=None, **kwargs)


class TestCoOccurrence:
    def test_two_shared_keywords(self, make_chunk: MakeChunk) -> None:
        a = make_chunk(0, keywords=["river", "land", "water", "sky", "fire"])
        b = make_chunk(1, keywords=["stone", "land", "river"])

        rels = _keyword_builder().build_relationships([a, b])

        assert len(rels) == 1
        rel = rels[0]
        assert rel.relationship_type == RelationshipType.CO_OCCURRENCE
        assert rel.source_chunk_id == "chunk-0"
        assert rel.target_chunk_id == "chunk-1"
        assert rel.strength == pytest.approx(2 / 3, abs=1e-4)
        assert rel.evidence == ["river", "land"]

    def test_single_shared_keyword_needs_lower_minimum(self, make_chunk: MakeChunk) -> None:
        a = make_chunk(0, keywords=["clinic", "ceremony", "details", "sacred", "opens"])
        b = make_chunk(1, keywords=["clinic", "monday", "serves", "patients", "weekly"])

        assert _keyword_builder().build_relationships([a, b]) == []

        rels = _keyword_builder(min_shared_keywords=1).build_relationships([a, b])
        assert len(rels) == 1
        assert rels[0].strength == pytest.approx(0.2)
        assert rels[0].evidence == ["clinic"]

    def test_below_threshold_is_omitted(self, make_chunk: MakeChunk) -> None:
        a = make_chunk(0, keywords=["a1", "b1", "c1", "d1", "e1"])
        b = make_chunk(1, keywords=["a1", "b1", "x1", "y1", "z1"])

        assert len(_keyword_builder(threshold=0.15).build_relationships([a, b])) == 1
        assert _keyword_builder(threshold=0.5).build_relationships([a, b]) == []


class TestSharedEntity:
    def test_jaccard_strength(self, make_chunk: MakeChunk) -> None:
        a = make_chunk(0, entities=["uluru", "kata tjuta"])
        b = make_chunk(1, entities=["uluru"])

        rels = _keyword_builder().build_relationships([a, b])

        assert len(rels) == 1
        assert rels[0].relationship_type == RelationshipType.SHARED_ENTITY
        assert rels[0].strength == pytest.approx(0.5)
        assert rels[0].evidence == ["uluru"]

    def test_no_entities_no_links(self, make_chunk: MakeChunk) -> None:
        rels = _keyword_builder().build_relationships([make_chunk(0), make_chunk(1)])
        assert rels == []


class TestSemanticSimilarity:
    def test_identical_text(self, make_chunk: MakeChunk) -> None:
        text = "river land water sky river"
        rels = RelationshipBuilder().build_relationships(
            [make_chunk(0, text=text), make_chunk(1, text=text)]
        )

        assert len(rels) == 1
        assert rels[0].relationship_type == RelationshipType.SEMANTIC_SIMILARITY
        assert rels[0].strength == pytest.approx(1.0)
        assert rels[0].evidence == ["river", "land", "sky", "water"]

    def test_unrelated_text(self, make_chunk: MakeChunk) -> None:
        rels = RelationshipBuilder().build_relationships(
            [make_chunk(0, text="river land water"), make_chunk(1, text="clinic patients monday")]
        )
        assert rels == []

    def test_disabled(self, make_chunk: MakeChunk) -> None:
        text = "river land water sky river"
        rels = _keyword_builder().build_relationships(
            [make_chunk(0, text=text), make_chunk(1, text=text)]
        )
        assert rels == []


class TestPairing:
    def test_each_pair_once_lower_index_is_source(self, make_chunk: MakeChunk) -> None:
        keywords = ["river", "land", "water"]
        chunks = [make_chunk(i, keywords=keywords) for i in range(3)]

        rels = _keyword_builder().build_relationships(chunks)

        assert len(rels) == 3
        pairs = [(r.source_chunk_id, r.target_chunk_id) for r in rels]
        assert pairs == [("chunk-0", "chunk-1"), ("chunk-0", "chunk-2"), ("chunk-1", "chunk-2")]
        assert len({r.pair for r in rels}) == 3

    def test_fewer_than_two_chunks(self, make_chunk: MakeChunk) -> None:
        assert RelationshipBuilder().build_relationships([]) == []
        assert RelationshipBuilder().build_relationships([make_chunk(0)]) == []

    def test_sparse_chunks_never_raise(self, make_chunk: MakeChunk) -> None:
        chunks = [make_chunk(i, text="...") for i in range(4)]
        assert RelationshipBuilder().build_relationships(chunks) == []


class TestHelpers:
    def test_jaccard(self) -> None:
        assert jaccard({"a", "b"}, {"b", "c"}) == pytest.approx(1 / 3)
        assert jaccard(set(), set()) == 0.0

    def test_cosine(self) -> None:
        assert cosine_similarity(Counter("ab"), Counter("ab")) == pytest.approx(1.0)
        assert cosine_similarity(Counter("a"), Counter("b")) == 0.0
        assert cosine_similarity(Counter(), Counter("a")) == 0.0
