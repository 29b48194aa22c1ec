"""Subprocess runner for the external transcription engine."""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from atrain_sync.config import AUDIO_PATH_PLACEHOLDER

logger = logging.getLogger(__name__)

TIMEOUT_EXIT_CODE = 124


class EngineRunError(RuntimeError):
    """Engine could not be started, with retryability hint."""

    def __init__(self, message: str, *, transient: bool) -> None:
        super().__init__(message)
        self.transient = transient


@dataclass(slots=True)
class EngineRunRequest:
    """Inputs required to transcribe one audio file."""

    audio_path: Path
    command_template: str
    timeout_seconds: int | None = None


@dataclass(slots=True)
class EngineRunResult:
    """Execution outcome reported by the engine process."""

    exit_code: int
    timed_out: bool
    stdout: str
    stderr: str

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0 and not self.timed_out


class TranscriptionEngine(Protocol):
    """Protocol implemented by engine runners."""

    def run(self, request: EngineRunRequest) -> EngineRunResult:
        """Run one transcription and wait for the process to exit."""


class CliTranscriptionEngine:
    """Run the engine command template once per audio file, synchronously."""

    def run(self, request: EngineRunRequest) -> EngineRunResult:
        run_args = build_run_args(
            command_template=request.command_template,
            audio_path=request.audio_path,
        )
        logger.debug("Running engine: %s", shlex.join(run_args))
        try:
            completed = subprocess.run(  # noqa: S603
                run_args,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=request.timeout_seconds,
            )
        except subprocess.TimeoutExpired as error:
            result = EngineRunResult(
                exit_code=TIMEOUT_EXIT_CODE,
                timed_out=True,
                stdout=_as_text(error.stdout),
                stderr=_as_text(error.stderr),
            )
        except FileNotFoundError as error:
            raise EngineRunError(
                f"Engine command not found: {run_args[0]}",
                transient=False,
            ) from error
        except OSError as error:
            raise EngineRunError(
                f"Engine failed to start: {error}",
                transient=True,
            ) from error
        else:
            result = EngineRunResult(
                exit_code=completed.returncode,
                timed_out=False,
                stdout=completed.stdout or "",
                stderr=completed.stderr or "",
            )

        _log_streams(request.audio_path, result)
        return result


def build_run_args(*, command_template: str, audio_path: Path) -> list[str]:
    """Render the command template into an argv list."""

    stripped = command_template.strip()
    if not stripped:
        raise EngineRunError("Engine command template is empty.", transient=False)
    if AUDIO_PATH_PLACEHOLDER not in stripped:
        raise EngineRunError(
            f"Engine command template must include {AUDIO_PATH_PLACEHOLDER}.",
            transient=False,
        )
    try:
        rendered = stripped.format(audio_path=shlex.quote(str(audio_path)))
    except (KeyError, IndexError) as error:
        raise EngineRunError(
            f"Unsupported command template placeholder: {error}",
            transient=False,
        ) from error
    except ValueError as error:
        raise EngineRunError(f"Malformed engine command template: {error}", transient=False) from error

    try:
        argv = shlex.split(rendered)
    except ValueError as error:
        raise EngineRunError(f"Malformed engine command template: {error}", transient=False) from error
    if not argv:
        raise EngineRunError(
            "Engine command template rendered empty command.",
            transient=False,
        )
    return argv


def _log_streams(audio_path: Path, result: EngineRunResult) -> None:
    if result.stdout.strip():
        logger.debug("Engine stdout for %s:\n%s", audio_path, result.stdout.rstrip())
    if result.stderr.strip():
        level = logging.DEBUG if result.succeeded else logging.WARNING
        logger.log(level, "Engine stderr for %s:\n%s", audio_path, result.stderr.rstrip())


def _as_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value
