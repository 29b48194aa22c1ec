"""Copy located transcriptions into the destination directory."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path


class MaterializeError(RuntimeError):
    """A located transcription could not be written to the destination."""


def materialized_name(stem: str, result_extension: str) -> str:
    return f"{stem}.{result_extension}"


def materialize_result(
    *,
    result_path: Path,
    dest_dir: Path,
    stem: str,
    result_extension: str,
) -> Path:
    """Copy `result_path` to `<dest_dir>/<stem>.<ext>` via a temporary file.

    The final name only appears once the full copy succeeded, so the
    completion ledger never sees a truncated result.
    """

    final_path = dest_dir / materialized_name(stem, result_extension)
    temp_path: Path | None = None
    try:
        handle, temp_name = tempfile.mkstemp(
            dir=dest_dir,
            prefix=f".{final_path.name}.",
            suffix=".partial",
        )
        os.close(handle)
        temp_path = Path(temp_name)
        shutil.copy(result_path, temp_path)
        os.replace(temp_path, final_path)
    except OSError as error:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        raise MaterializeError(
            f"Failed to copy {result_path} to {final_path}: {error}",
        ) from error
    return final_path
