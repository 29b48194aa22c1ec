"""Runtime configuration for the transcription sync pipeline."""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path

AUDIO_PATH_PLACEHOLDER = "{audio_path}"
DEFAULT_ENGINE_COMMAND = f"aTrain_core transcribe {AUDIO_PATH_PLACEHOLDER}"


def default_output_root() -> Path:
    """Folder where aTrain_core writes its timestamped run folders."""

    return Path.home() / "Documents" / "aTrain" / "transcriptions"


@dataclass(slots=True)
class EngineSettings:
    """External transcription engine invocation settings."""

    command_template: str = DEFAULT_ENGINE_COMMAND
    timeout_seconds: int | None = None


@dataclass(slots=True)
class LayoutSettings:
    """On-disk layout of engine run folders."""

    output_root: Path = field(default_factory=default_output_root)
    metadata_file_name: str = "metadata.txt"
    result_file_name: str = "transcription.txt"
    metadata_path_key: str = "path_to_audio_file"


@dataclass(slots=True)
class DiscoverySettings:
    """Which source files are inputs and which destination files are results."""

    audio_extensions: tuple[str, ...] = ("mp3",)
    result_extension: str = "md"


@dataclass(slots=True)
class Settings:
    """Application settings grouped by domain concerns."""

    engine: EngineSettings = field(default_factory=EngineSettings)
    layout: LayoutSettings = field(default_factory=LayoutSettings)
    discovery: DiscoverySettings = field(default_factory=DiscoverySettings)

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment, falling back to aTrain defaults."""

        output_root = os.getenv("ATRAIN_SYNC_OUTPUT_ROOT", "").strip()
        return cls(
            engine=EngineSettings(
                command_template=os.getenv("ATRAIN_SYNC_ENGINE_COMMAND", DEFAULT_ENGINE_COMMAND),
                timeout_seconds=_env_optional_int("ATRAIN_SYNC_ENGINE_TIMEOUT_SECONDS"),
            ),
            layout=LayoutSettings(
                output_root=Path(output_root).expanduser() if output_root else default_output_root(),
            ),
            discovery=DiscoverySettings(
                audio_extensions=collect_extensions(
                    os.getenv("ATRAIN_SYNC_AUDIO_EXTENSIONS", "mp3").split(","),
                ),
                result_extension=normalize_extension(
                    os.getenv("ATRAIN_SYNC_RESULT_EXTENSION", "md"),
                ),
            ),
        )

    def validate(self) -> None:
        """Raise configuration error if engine or discovery settings are unusable."""

        template = self.engine.command_template.strip()
        if not template:
            raise ValueError("ATRAIN_SYNC_ENGINE_COMMAND must not be empty.")
        if AUDIO_PATH_PLACEHOLDER not in template:
            raise ValueError(
                f"ATRAIN_SYNC_ENGINE_COMMAND must include {AUDIO_PATH_PLACEHOLDER}: {template!r}",
            )
        try:
            shlex.split(template.format(audio_path=shlex.quote("audio.mp3")))
        except (KeyError, IndexError, ValueError) as error:
            raise ValueError(f"ATRAIN_SYNC_ENGINE_COMMAND is malformed: {template!r} ({error})") from error
        if self.engine.timeout_seconds is not None and self.engine.timeout_seconds <= 0:
            raise ValueError("ATRAIN_SYNC_ENGINE_TIMEOUT_SECONDS must be > 0.")
        if not self.discovery.audio_extensions:
            raise ValueError("ATRAIN_SYNC_AUDIO_EXTENSIONS must name at least one extension.")
        for extension in (*self.discovery.audio_extensions, self.discovery.result_extension):
            _validate_extension(extension)
        if self.discovery.result_extension in self.discovery.audio_extensions:
            raise ValueError(
                "ATRAIN_SYNC_RESULT_EXTENSION must differ from audio extensions: "
                f"{self.discovery.result_extension!r}",
            )


def normalize_extension(value: str) -> str:
    """Lower-case an extension and drop a leading dot."""

    return value.strip().lstrip(".").lower()


def collect_extensions(values: list[str] | tuple[str, ...]) -> tuple[str, ...]:
    """Normalize and dedupe extensions, keeping first-seen order."""

    deduped: list[str] = []
    seen: set[str] = set()
    for value in values:
        normalized = normalize_extension(value)
        if not normalized or normalized in seen:
            continue
        seen.add(normalized)
        deduped.append(normalized)
    return tuple(deduped)


def _validate_extension(value: str) -> None:
    if not value or "/" in value or "\\" in value or "." in value:
        raise ValueError(
            f"Invalid file extension: {value!r}. Expected a bare suffix such as 'mp3'.",
        )


def _env_optional_int(name: str) -> int | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    try:
        parsed = int(value.strip())
    except ValueError as error:
        raise ValueError(f"Invalid integer value for {name}: {value!r}") from error
    if parsed == 0:
        return None
    return parsed
