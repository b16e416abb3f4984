"""Configuration module -- exports PipelineConfig, Settings, load_config and the lexicon."""

from cultural_chunker.config.domain_knowledge import (
    CULTURAL_LEXICON,
    REVIEW_POLICIES,
    LexiconCategory,
    LexiconEntry,
    ReviewPolicy,
)
from cultural_chunker.config.loader import load_config
from cultural_chunker.config.settings import PipelineConfig, Settings

__all__ = [
    "CULTURAL_LEXICON",
    "LexiconCategory",
    "LexiconEntry",
    "PipelineConfig",
    "REVIEW_POLICIES",
    "ReviewPolicy",
    "Settings",
    "load_config",
]
