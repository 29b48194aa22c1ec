"""CLI entrypoint for atrain-sync."""

import logging
from pathlib import Path

import rich_click as click
from rich.console import Console
from rich.logging import RichHandler

from atrain_sync import __version__
from atrain_sync.sync.controllers import SetupError, SyncCliController, SyncCommand

click.rich_click.USE_MARKDOWN = True
SYNC_CONTROLLER = SyncCliController()


@click.command()
@click.version_option(version=__version__, prog_name="atrain-sync")
@click.argument("source_dir", type=click.Path(path_type=Path))
@click.argument("dest_dir", type=click.Path(path_type=Path))
@click.option(
    "--verbose/--quiet",
    default=False,
    show_default=True,
    help="Log engine output and every pipeline step.",
)
@click.option(
    "--engine-command",
    default=None,
    help=(
        "Engine command template; must include {audio_path}. "
        "Defaults to ATRAIN_SYNC_ENGINE_COMMAND or `aTrain_core transcribe {audio_path}`."
    ),
)
@click.option(
    "--output-root",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help=(
        "Folder where the engine writes run folders. "
        "Defaults to ATRAIN_SYNC_OUTPUT_ROOT or ~/Documents/aTrain/transcriptions."
    ),
)
@click.option(
    "--audio-ext",
    "audio_extensions",
    multiple=True,
    help="Audio file extension to transcribe. Can be repeated; defaults to mp3.",
)
@click.option(
    "--timeout-seconds",
    type=click.IntRange(min=1),
    default=None,
    help="Abandon a transcription after this many seconds. No limit by default.",
)
def atrain_sync(  # noqa: PLR0913
    source_dir: Path,
    dest_dir: Path,
    verbose: bool,
    engine_command: str | None,
    output_root: Path | None,
    audio_extensions: tuple[str, ...],
    timeout_seconds: int | None,
) -> None:
    """Transcribe audio files in SOURCE_DIR that have no transcription in DEST_DIR yet.

    Each new transcription is copied to DEST_DIR as `<name>.md`, so running
    the command again only picks up files added since.
    """

    _configure_logging(verbose)
    try:
        lines = SYNC_CONTROLLER.run_sync(
            SyncCommand(
                source_dir=source_dir,
                dest_dir=dest_dir,
                engine_command=engine_command,
                output_root=output_root,
                audio_extensions=audio_extensions,
                timeout_seconds=timeout_seconds,
            ),
        )
    except SetupError as error:
        raise click.ClickException(str(error)) from error
    _emit_lines(lines)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    atrain_sync()
