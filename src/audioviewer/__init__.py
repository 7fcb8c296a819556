"""
Parquet Audio Viewer

A small web viewer for audio datasets stored in Parquet files. Loads audio
payloads, durations and transcripts once at startup and serves them as
paginated, filterable HTML tables with embedded audio players.
"""

__version__ = "0.1.0"
