"""Pipeline services: chunking, classification, analysis and linking."""

from cultural_chunker.services.chunking import ChunkBuilder, TextSegmenter
from cultural_chunker.services.relationship_builder import RelationshipBuilder
from cultural_chunker.services.review_policy import build_review_request, recommendations_for
from cultural_chunker.services.sensitivity_classifier import SensitivityClassifier
from cultural_chunker.services.similarity_search import find_similar_chunks
from cultural_chunker.services.text_analyzer import TextAnalyzer

__all__ = [
    "ChunkBuilder",
    "RelationshipBuilder",
    "SensitivityClassifier",
    "TextAnalyzer",
    "TextSegmenter",
    "build_review_request",
    "find_similar_chunks",
    "recommendations_for",
]
