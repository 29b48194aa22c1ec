"""Local stand-in for aTrain_core used by integration tests.

Writes one timestamped run folder under `ATRAIN_SYNC_OUTPUT_ROOT` with the
same `metadata.txt` / `transcription.txt` layout as the real engine.
"""

from __future__ import annotations

import argparse
import os
import sys
import uuid
from datetime import datetime
from pathlib import Path

from atrain_sync.config import LayoutSettings, default_output_root


def main(argv: list[str] | None = None) -> int:
    """Run a deterministic fake transcription."""

    parser = argparse.ArgumentParser(prog="aTrain_core")
    subparsers = parser.add_subparsers(dest="verb", required=True)
    transcribe = subparsers.add_parser("transcribe")
    transcribe.add_argument("audio_path")
    args = parser.parse_args(argv)

    if _env_flag("ATRAIN_SYNC_FAKE_FAIL"):
        print(f"Could not transcribe {args.audio_path}", file=sys.stderr)
        return 1

    layout = LayoutSettings()
    raw_root = os.getenv("ATRAIN_SYNC_OUTPUT_ROOT", "").strip()
    output_root = Path(raw_root) if raw_root else default_output_root()
    stamp = datetime.now().strftime("%Y-%m-%d %H-%M-%S")
    run_folder = output_root / f"{stamp} {uuid.uuid4().hex[:8]}"
    run_folder.mkdir(parents=True)

    recorded = os.getenv("ATRAIN_SYNC_FAKE_RECORDED_PATH") or args.audio_path
    (run_folder / layout.metadata_file_name).write_text(
        f"{layout.metadata_path_key}: {recorded}\nmodel: fake\n",
        "utf-8",
    )
    if not _env_flag("ATRAIN_SYNC_FAKE_NO_RESULT"):
        (run_folder / layout.result_file_name).write_text(
            f"Transcription of {Path(args.audio_path).name}\n",
            "utf-8",
        )
    print(f"Transcribed {args.audio_path} into {run_folder}")
    return 0


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
