"""Idempotent sync of audio files into aTrain transcriptions."""

__version__ = "0.3.0"
