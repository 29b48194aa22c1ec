"""Locate the engine run folder produced for a specific audio file.

The engine appends a new timestamped folder under a shared output root on
every run and records the input path only inside that folder's metadata
file. After a successful invocation the newest folder is taken as the
candidate; it is accepted only if its metadata names the same audio path.
Older folders are never inspected, even when they belong to the same input.

This assumes no other process writes run folders into the output root while
a sync is running.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from atrain_sync.config import LayoutSettings

logger = logging.getLogger(__name__)


class LocateOutcome(str, Enum):
    """Why a run folder was, or was not, matched to an input."""

    LOCATED = "located"
    NO_RUN_FOLDER = "no_run_folder"
    METADATA_MISSING = "metadata_missing"
    PATH_MISMATCH = "path_mismatch"
    RESULT_MISSING = "result_missing"


@dataclass(frozen=True, slots=True)
class RunFolder:
    """One engine output folder and its modification time."""

    path: Path
    modified_ns: int


@dataclass(slots=True)
class LocateResult:
    """Outcome of matching the newest run folder against an audio path."""

    outcome: LocateOutcome
    run_folder: RunFolder | None = None
    result_path: Path | None = None
    recorded_path: str | None = None

    @property
    def located(self) -> bool:
        return self.outcome is LocateOutcome.LOCATED


def latest_run_folder(output_root: Path) -> RunFolder | None:
    """Most recently modified directory directly under `output_root`.

    Ties on modification time are broken by folder name so repeated scans
    pick the same folder.
    """

    latest: RunFolder | None = None
    try:
        with os.scandir(output_root) as iterator:
            for entry in iterator:
                try:
                    if not entry.is_dir():
                        continue
                    modified_ns = entry.stat().st_mtime_ns
                except OSError as error:
                    logger.debug("Ignoring unreadable entry %s: %s", entry.path, error)
                    continue
                candidate = RunFolder(path=Path(entry.path), modified_ns=modified_ns)
                if latest is None or _sort_key(candidate) > _sort_key(latest):
                    latest = candidate
    except OSError as error:
        logger.warning("Could not read engine output root %s: %s", output_root, error)
        return None
    return latest


def read_recorded_audio_path(metadata_path: Path, key: str) -> str | None:
    """Value of the first `<key>: <path>` line in a metadata file.

    Everything after the first colon is the path, so paths that contain a
    colon survive intact.
    """

    try:
        content = metadata_path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None
    prefix = f"{key}:"
    for line in content.splitlines():
        if line.startswith(prefix):
            return line[len(prefix) :].strip()
    return None


def locate_result(
    *,
    output_root: Path,
    audio_path: Path,
    layout: LayoutSettings,
) -> LocateResult:
    """Match the newest run folder to `audio_path` and find its transcription."""

    run_folder = latest_run_folder(output_root)
    if run_folder is None:
        return LocateResult(outcome=LocateOutcome.NO_RUN_FOLDER)

    recorded = read_recorded_audio_path(
        run_folder.path / layout.metadata_file_name,
        layout.metadata_path_key,
    )
    if recorded is None:
        return LocateResult(outcome=LocateOutcome.METADATA_MISSING, run_folder=run_folder)
    if not same_audio_path(recorded, audio_path):
        return LocateResult(
            outcome=LocateOutcome.PATH_MISMATCH,
            run_folder=run_folder,
            recorded_path=recorded,
        )

    result_path = run_folder.path / layout.result_file_name
    if not result_path.is_file():
        return LocateResult(
            outcome=LocateOutcome.RESULT_MISSING,
            run_folder=run_folder,
            recorded_path=recorded,
        )
    return LocateResult(
        outcome=LocateOutcome.LOCATED,
        run_folder=run_folder,
        result_path=result_path,
        recorded_path=recorded,
    )


def same_audio_path(recorded: str, audio_path: Path) -> bool:
    """Compare a recorded metadata path with an input path, lexically."""

    if not recorded:
        return False
    return os.path.normpath(os.path.abspath(recorded)) == os.path.normpath(
        os.path.abspath(audio_path),
    )


def _sort_key(folder: RunFolder) -> tuple[int, str]:
    return folder.modified_ns, folder.path.name
