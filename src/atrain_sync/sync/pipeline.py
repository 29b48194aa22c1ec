"""End-to-end sync orchestration: diff, invoke, harvest, copy."""

from __future__ import annotations

import logging
from pathlib import Path

from atrain_sync.config import Settings
from atrain_sync.sync.discovery import discover_audio_files
from atrain_sync.sync.engine import EngineRunError, EngineRunRequest, TranscriptionEngine
from atrain_sync.sync.ledger import load_completion_ledger, select_pending
from atrain_sync.sync.locator import LocateOutcome, locate_result
from atrain_sync.sync.materializer import MaterializeError, materialize_result
from atrain_sync.sync.models import InputItem, ItemOutcome, ItemResult, SyncSummary

logger = logging.getLogger(__name__)


class SyncPipeline:
    """Process pending audio files one at a time.

    Every stage failure is confined to its item and recorded as an
    `ItemResult`; `run` itself only raises on programming errors.
    """

    def __init__(self, *, settings: Settings, engine: TranscriptionEngine) -> None:
        self.settings = settings
        self.engine = engine

    def run(self, *, source_dir: Path, dest_dir: Path) -> SyncSummary:
        items = discover_audio_files(source_dir, self.settings.discovery.audio_extensions)
        logger.info("Found %d audio files in %s", len(items), source_dir)

        ledger = load_completion_ledger(dest_dir, self.settings.discovery.result_extension)
        logger.info("Found %d completed transcriptions in %s", len(ledger), dest_dir)

        pending = select_pending(items, ledger)
        logger.info("Selected %d files for transcription", len(pending))

        summary = SyncSummary(
            discovered=len(items),
            already_done=len(items) - len(pending),
            selected=len(pending),
        )
        claimed: set[str] = set()
        for index, item in enumerate(pending, start=1):
            if item.stem in claimed:
                result = ItemResult(
                    item=item,
                    outcome=ItemOutcome.DUPLICATE_STEM,
                    detail=f"stem {item.stem!r} already handled earlier in this run",
                )
            else:
                claimed.add(item.stem)
                logger.info("[%d/%d] Transcribing %s", index, len(pending), item.path)
                result = self.process_item(item, dest_dir=dest_dir)
            _log_item_result(result)
            summary.results.append(result)

        logger.info(
            "Materialized %d of %d selected files",
            summary.count(ItemOutcome.MATERIALIZED),
            summary.selected,
        )
        return summary

    def process_item(self, item: InputItem, *, dest_dir: Path) -> ItemResult:
        """Invoke the engine for one item, then locate and copy its result."""

        try:
            run_result = self.engine.run(
                EngineRunRequest(
                    audio_path=item.path,
                    command_template=self.settings.engine.command_template,
                    timeout_seconds=self.settings.engine.timeout_seconds,
                ),
            )
        except EngineRunError as error:
            return ItemResult(item=item, outcome=ItemOutcome.ENGINE_FAILED, detail=str(error))

        if not run_result.succeeded:
            detail = (
                f"timed out after {self.settings.engine.timeout_seconds}s"
                if run_result.timed_out
                else f"exit code {run_result.exit_code}"
            )
            return ItemResult(item=item, outcome=ItemOutcome.ENGINE_FAILED, detail=detail)

        located = locate_result(
            output_root=self.settings.layout.output_root,
            audio_path=item.path,
            layout=self.settings.layout,
        )
        if located.outcome is LocateOutcome.RESULT_MISSING:
            return ItemResult(
                item=item,
                outcome=ItemOutcome.INCOMPLETE,
                detail=f"no {self.settings.layout.result_file_name} in {located.run_folder.path}",
            )
        if not located.located:
            return ItemResult(
                item=item,
                outcome=ItemOutcome.NOT_LOCATED,
                detail=_describe_locate_miss(located.outcome, located.recorded_path),
            )

        try:
            destination = materialize_result(
                result_path=located.result_path,
                dest_dir=dest_dir,
                stem=item.stem,
                result_extension=self.settings.discovery.result_extension,
            )
        except MaterializeError as error:
            return ItemResult(item=item, outcome=ItemOutcome.COPY_FAILED, detail=str(error))
        return ItemResult(item=item, outcome=ItemOutcome.MATERIALIZED, destination=destination)


def run_sync(
    *,
    settings: Settings,
    engine: TranscriptionEngine,
    source_dir: Path,
    dest_dir: Path,
) -> SyncSummary:
    """Run one sync with provided dependencies."""

    return SyncPipeline(settings=settings, engine=engine).run(
        source_dir=source_dir,
        dest_dir=dest_dir,
    )


def _describe_locate_miss(outcome: LocateOutcome, recorded_path: str | None) -> str:
    if outcome is LocateOutcome.NO_RUN_FOLDER:
        return "engine output root has no run folders"
    if outcome is LocateOutcome.METADATA_MISSING:
        return "latest run folder has no readable audio path in its metadata"
    return f"latest run folder belongs to {recorded_path}"


def _log_item_result(result: ItemResult) -> None:
    if result.outcome is ItemOutcome.MATERIALIZED:
        logger.info("Wrote %s", result.destination)
        return
    logger.warning("Skipped %s (%s): %s", result.item.path, result.outcome.value, result.detail)
