"""Shared test fixtures."""

from __future__ import annotations

import os
import shlex
import sys
from pathlib import Path

import pytest

from atrain_sync.config import LayoutSettings

FAKE_ENGINE_COMMAND_TEMPLATE = (
    f"{shlex.quote(sys.executable)} -m atrain_sync.sync.fake_engine transcribe {{audio_path}}"
)


def _write_run_folder(  # noqa: PLR0913
    output_root: Path,
    name: str,
    *,
    recorded_path: Path | str | None,
    result_text: str | None = "transcribed text\n",
    modified_ns: int | None = None,
    layout: LayoutSettings | None = None,
) -> Path:
    """Create an engine run folder the way aTrain_core lays it out."""

    layout = layout or LayoutSettings(output_root=output_root)
    folder = output_root / name
    folder.mkdir(parents=True)
    if recorded_path is not None:
        (folder / layout.metadata_file_name).write_text(
            f"model: large-v3\n{layout.metadata_path_key}: {recorded_path}\n",
            "utf-8",
        )
    if result_text is not None:
        (folder / layout.result_file_name).write_text(result_text, "utf-8")
    if modified_ns is not None:
        os.utime(folder, ns=(modified_ns, modified_ns))
    return folder


@pytest.fixture()
def output_root(tmp_path: Path, monkeypatch) -> Path:
    """Isolated engine output root, also exported for the fake engine."""

    root = tmp_path / "engine-output"
    root.mkdir()
    monkeypatch.setenv("ATRAIN_SYNC_OUTPUT_ROOT", str(root))
    return root


@pytest.fixture()
def source_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "recordings"
    directory.mkdir()
    return directory


@pytest.fixture()
def dest_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "transcripts"
    directory.mkdir()
    return directory


@pytest.fixture()
def fake_engine(monkeypatch) -> str:
    """Point the engine command at the local fake aTrain_core."""

    for name in (
        "ATRAIN_SYNC_FAKE_FAIL",
        "ATRAIN_SYNC_FAKE_NO_RESULT",
        "ATRAIN_SYNC_FAKE_RECORDED_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ATRAIN_SYNC_ENGINE_COMMAND", FAKE_ENGINE_COMMAND_TEMPLATE)
    return FAKE_ENGINE_COMMAND_TEMPLATE


@pytest.fixture()
def make_run_folder(output_root: Path):
    """Factory writing run folders into the isolated output root."""

    def _make(name: str, **kwargs) -> Path:
        return _write_run_folder(output_root, name, **kwargs)

    return _make
