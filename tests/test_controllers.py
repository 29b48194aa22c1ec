from __future__ import annotations

from pathlib import Path

import allure
import pytest

from atrain_sync.sync.controllers import (
    SetupError,
    SyncCliController,
    SyncCommand,
    render_summary_lines,
)
from atrain_sync.sync.engine import EngineRunRequest, EngineRunResult
from atrain_sync.sync.models import InputItem, ItemOutcome, ItemResult, SyncSummary

pytestmark = [
    allure.epic("Transcription Sync"),
    allure.feature("CLI"),
]


class _NeverCalledEngine:
    def run(self, request: EngineRunRequest) -> EngineRunResult:
        raise AssertionError(f"engine must not run for {request.audio_path}")


def test_missing_source_directory_is_a_setup_error(tmp_path: Path, dest_dir: Path) -> None:
    controller = SyncCliController(engine=_NeverCalledEngine())

    with pytest.raises(SetupError, match="is not a valid source directory"):
        controller.run_sync(SyncCommand(source_dir=tmp_path / "missing", dest_dir=dest_dir))


def test_file_as_destination_is_a_setup_error(
    tmp_path: Path,
    source_dir: Path,
    output_root: Path,
) -> None:
    (source_dir / "a.mp3").write_bytes(b"ID3")
    dest_file = tmp_path / "out.md"
    dest_file.write_text("", "utf-8")
    controller = SyncCliController(engine=_NeverCalledEngine())

    with pytest.raises(SetupError, match="is not a valid destination directory"):
        controller.run_sync(SyncCommand(source_dir=source_dir, dest_dir=dest_file))


def test_invalid_settings_are_setup_errors(source_dir: Path, dest_dir: Path) -> None:
    controller = SyncCliController(engine=_NeverCalledEngine())

    with pytest.raises(SetupError, match=r"must include \{audio_path\}"):
        controller.run_sync(
            SyncCommand(
                source_dir=source_dir,
                dest_dir=dest_dir,
                engine_command="aTrain_core transcribe",
            ),
        )


def test_unbalanced_quote_in_engine_command_is_a_setup_error(source_dir: Path, dest_dir: Path) -> None:
    controller = SyncCliController(engine=_NeverCalledEngine())

    with pytest.raises(SetupError, match="ATRAIN_SYNC_ENGINE_COMMAND is malformed"):
        controller.run_sync(
            SyncCommand(
                source_dir=source_dir,
                dest_dir=dest_dir,
                engine_command="aTrain_core 'transcribe {audio_path}",
            ),
        )


def test_cli_overrides_win_over_environment(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("ATRAIN_SYNC_OUTPUT_ROOT", str(tmp_path / "from-env"))
    monkeypatch.setenv("ATRAIN_SYNC_AUDIO_EXTENSIONS", "mp3")
    controller = SyncCliController(engine=_NeverCalledEngine())

    settings = controller.resolve_settings(
        SyncCommand(
            source_dir=tmp_path,
            dest_dir=tmp_path,
            engine_command="engine run {audio_path}",
            output_root=tmp_path / "from-cli",
            audio_extensions=(".FLAC", "wav"),
            timeout_seconds=30,
        ),
    )

    assert settings.layout.output_root == tmp_path / "from-cli"
    assert settings.discovery.audio_extensions == ("flac", "wav")
    assert settings.engine.command_template == "engine run {audio_path}"
    assert settings.engine.timeout_seconds == 30


def test_output_root_is_created_at_setup(
    tmp_path: Path,
    source_dir: Path,
    dest_dir: Path,
) -> None:
    output_root = tmp_path / "docs" / "aTrain" / "transcriptions"
    controller = SyncCliController(engine=_NeverCalledEngine())

    lines = controller.run_sync(
        SyncCommand(source_dir=source_dir, dest_dir=dest_dir, output_root=output_root),
    )

    assert output_root.is_dir()
    assert lines == [
        "Sync completed: discovered=0 already_done=0 selected=0 materialized=0 "
        "engine_failed=0 not_located=0 incomplete=0 copy_failed=0 duplicate_stem=0",
    ]


def test_summary_lists_items_that_were_not_materialized() -> None:
    summary = SyncSummary(
        discovered=3,
        already_done=1,
        selected=2,
        results=[
            ItemResult(
                item=InputItem(Path("/in/a.mp3")),
                outcome=ItemOutcome.MATERIALIZED,
                destination=Path("/out/a.md"),
            ),
            ItemResult(
                item=InputItem(Path("/in/b.mp3")),
                outcome=ItemOutcome.INCOMPLETE,
                detail="no transcription.txt in /runs/1",
            ),
        ],
    )

    lines = render_summary_lines(summary)

    assert lines[0].startswith("Sync completed: discovered=3 already_done=1 selected=2 ")
    assert "materialized=1" in lines[0]
    assert "incomplete=1" in lines[0]
    assert lines[1:] == ["  incomplete: /in/b.mp3 (no transcription.txt in /runs/1)"]
