"""
Transaction ingestion and reporting engine.

Uploads of delimited transaction files are parsed, validated and kept as a
single current snapshot; account, malformed and collections reports are
derived from that snapshot on every request.
"""

__version__ = "0.1.0"
