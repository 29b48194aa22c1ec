"""Controller for the sync CLI command."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from atrain_sync.config import Settings, collect_extensions
from atrain_sync.sync.engine import CliTranscriptionEngine, TranscriptionEngine
from atrain_sync.sync.models import ItemOutcome, SyncSummary
from atrain_sync.sync.pipeline import run_sync


class SetupError(ValueError):
    """Invalid arguments or settings detected before any item is processed."""


@dataclass(slots=True)
class SyncCommand:
    """CLI inputs for one sync run."""

    source_dir: Path
    dest_dir: Path
    engine_command: str | None = None
    output_root: Path | None = None
    audio_extensions: tuple[str, ...] = ()
    timeout_seconds: int | None = None


class SyncCliController:
    """Coordinates sync command execution."""

    def __init__(self, engine: TranscriptionEngine | None = None) -> None:
        self.engine = engine or CliTranscriptionEngine()

    def run_sync(self, command: SyncCommand) -> list[str]:
        settings = self.resolve_settings(command)
        for label, directory in (("source", command.source_dir), ("destination", command.dest_dir)):
            if not directory.is_dir():
                raise SetupError(f"{directory} is not a valid {label} directory")
        try:
            settings.layout.output_root.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise SetupError(
                f"Cannot create engine output root {settings.layout.output_root}: {error}",
            ) from error

        summary = run_sync(
            settings=settings,
            engine=self.engine,
            source_dir=command.source_dir,
            dest_dir=command.dest_dir,
        )
        return render_summary_lines(summary)

    def resolve_settings(self, command: SyncCommand) -> Settings:
        """Environment settings with CLI overrides applied, validated."""

        try:
            settings = Settings.from_env()
            if command.engine_command is not None:
                settings.engine.command_template = command.engine_command
            if command.output_root is not None:
                settings.layout.output_root = command.output_root.expanduser()
            if command.audio_extensions:
                settings.discovery.audio_extensions = collect_extensions(command.audio_extensions)
            if command.timeout_seconds is not None:
                settings.engine.timeout_seconds = command.timeout_seconds
            settings.validate()
        except ValueError as error:
            raise SetupError(str(error)) from error
        return settings


def render_summary_lines(summary: SyncSummary) -> list[str]:
    counts = summary.counts()
    lines = [
        "Sync completed: "
        f"discovered={summary.discovered} "
        f"already_done={summary.already_done} "
        f"selected={summary.selected} "
        + " ".join(f"{outcome.value}={counts[outcome]}" for outcome in ItemOutcome),
    ]
    for result in summary.results:
        if result.outcome is ItemOutcome.MATERIALIZED:
            continue
        lines.append(f"  {result.outcome.value}: {result.item.path} ({result.detail or '-'})")
    return lines
