"""Abstract base class for upstream entity extractors.

The pipeline never extracts entities itself.  Callers either pass a
pre-computed ``entity_map`` (segment index → names) to
:meth:`~cultural_chunker.pipeline.orchestrator.DocumentPipeline.process`, or
inject an implementation of this interface that is run once per chunk.
Either way the names feed the ``shared_entity`` relationships.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations live outside this library (NER services, gazetteer
# lookups, LLM-backed extractors).  Tests use an in-memory fake.
class IEntityExtractor(ABC):
    """Contract for services that name the entities mentioned in a text.

    Implementations are called from worker threads, one call per chunk,
    and must therefore be safe to call concurrently.
    """

    @abstractmethod
    def extract(self, text: str) -> set[str]:
        """Return the entity names mentioned in *text*.

        Parameters
        ----------
        text:
            The text of one chunk.

        Returns
        -------
        set[str]
            Raw entity names.  The pipeline normalizes them, so casing and
            surrounding punctuation do not matter.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this extractor.

        Example return values: ``"spacy"``, ``"gazetteer"``.
        """
