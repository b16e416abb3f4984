"""Public interface definitions for pluggable upstream services.

The pipeline core has no external dependencies of its own; anything that
would need one (an NER model, a gazetteer service) is injected through the
abstract base classes defined here.

    Interface           →  Used by
    ─────────────────────────────────────────────────────
    IEntityExtractor    →  DocumentPipeline (per-chunk entity names)
"""

from cultural_chunker.interfaces.entity_extractor import IEntityExtractor

__all__ = ["IEntityExtractor"]
