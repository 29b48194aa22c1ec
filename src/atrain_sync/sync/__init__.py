"""Diff, invoke, harvest and copy pipeline for aTrain transcriptions.

Why no job queue or state database?
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
The destination directory already records what is done: one result file per
audio stem. Rebuilding that ledger from a directory listing on every run keeps
re-runs safe without any persisted state that could drift from the files a
user actually sees, and a crashed run is simply picked up by the next one.
"""

from atrain_sync.sync.engine import (
    CliTranscriptionEngine,
    EngineRunError,
    EngineRunRequest,
    EngineRunResult,
    TranscriptionEngine,
)
from atrain_sync.sync.models import InputItem, ItemOutcome, ItemResult, SyncSummary
from atrain_sync.sync.pipeline import SyncPipeline, run_sync

__all__ = [
    "CliTranscriptionEngine",
    "EngineRunError",
    "EngineRunRequest",
    "EngineRunResult",
    "InputItem",
    "ItemOutcome",
    "ItemResult",
    "SyncPipeline",
    "SyncSummary",
    "TranscriptionEngine",
    "run_sync",
]
