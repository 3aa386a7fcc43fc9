"""
Upload ingestion: read a stream, classify it and replace the snapshot.
"""

from .pipeline import IngestPipeline

__all__ = [
    "IngestPipeline",
]
