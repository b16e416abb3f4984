"""Text segmentation and chunk construction.

1. **Segment** (segmenter.py / TextSegmenter) -- Splits the document into
   paragraph segments, breaking over-long paragraphs at sentence
   boundaries and merging fragments that are too short to stand alone.

2. **Chunk** (chunk_builder.py / ChunkBuilder) -- Groups segments into
   ~500-word windows that overlap by a fixed 150 words, recording exact
   source offsets and page ranges for every chunk.
"""

from cultural_chunker.services.chunking.chunk_builder import ChunkBuilder
from cultural_chunker.services.chunking.segmenter import TextSegmenter

__all__ = ["ChunkBuilder", "TextSegmenter"]
