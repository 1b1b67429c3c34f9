"""
``chunkpipe``
=============

Provides iterator adapters which regroup any Python iterator into
fixed-size tuples of consecutive items, keeping whatever is left over
once the source runs dry available for inspection.
"""
from ._version import __version__
from . import buffer
from . import chunks
from . import sources
from .chunks import ArrayChunks, array_chunks, chunked


__all__ = [
    "__version__",
    "buffer",
    "chunks",
    "sources",
    "ArrayChunks",
    "array_chunks",
    "chunked",
]
