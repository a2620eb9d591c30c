# stitch/config/settings.py
# User settings (paths, model, request queue limits) persisted as JSON in ~/.stitch/config.json

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from ..core.exceptions import JSONParsingError
from ..stitch_io.generics import read_json_safe, write_json_safe

ENVIRONMENTS = ("development", "production")


def _check_int(name: str, value: Any, minimum: int, expected: str) -> None:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ValueError(f"{name} must be {expected}, got {value}")


def _check_bool(name: str, value: Any) -> None:
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be a boolean (true/false), got {type(value).__name__}: {value}")


@dataclass
class StitchSettings:
    data_dir: str = "data"
    output_dir: str = "output"
    resume_filename: str = "resume.json"
    job_filename: str = "job.txt"

    base_dir: str = ".stitch"
    history_filename: str = "history.json"

    model: str = "gpt-5-mini"
    # ignored by gpt-5 & o-series models
    temperature: float = 0.2

    queue_max_concurrent: int = 5
    queue_default_timeout_ms: int = 30000
    queue_logging: bool = False

    # resolve edits the rule parser cannot handle w/ the model
    ai_fallback: bool = True

    # "production" also redacts filesystem paths in error messages
    environment: str = "development"

    def __post_init__(self) -> None:
        if isinstance(self.temperature, bool) or not isinstance(self.temperature, (int, float)):
            raise ValueError(f"temperature must be a number, got {type(self.temperature).__name__}")
        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError(f"temperature must be 0.0-2.0, got {self.temperature}")

        _check_int("queue_max_concurrent", self.queue_max_concurrent, 1, "a positive integer")
        _check_int("queue_default_timeout_ms", self.queue_default_timeout_ms, 0, "an integer >= 0")
        _check_bool("queue_logging", self.queue_logging)
        _check_bool("ai_fallback", self.ai_fallback)

        if self.environment not in ENVIRONMENTS:
            raise ValueError(f"environment must be one of {list(ENVIRONMENTS)}, got '{self.environment}'")

    @property
    def resume_path(self) -> Path:
        return Path(self.data_dir) / self.resume_filename

    @property
    def job_path(self) -> Path:
        return Path(self.data_dir) / self.job_filename

    @property
    def stitch_dir(self) -> Path:
        return Path(self.base_dir)

    @property
    def history_path(self) -> Path:
        return self.stitch_dir / self.history_filename

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


class SettingsManager:
    """Loads & caches `StitchSettings` from a JSON file.

    An unreadable or invalid file is reported once & replaced by defaults in
    memory; it is only overwritten on the next explicit save.
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or Path.home() / ".stitch" / "config.json"
        self._settings: Optional[StitchSettings] = None

    def load(self) -> StitchSettings:
        if self._settings is None:
            self._settings = self._read()
        return self._settings

    def _read(self) -> StitchSettings:
        if not self.config_path.exists():
            return StitchSettings()
        try:
            return StitchSettings(**read_json_safe(self.config_path))
        except (JSONParsingError, TypeError, ValueError) as e:
            typer.echo(f"Warning: Invalid config file {self.config_path}: {e}")
            typer.echo("Using default settings")
            return StitchSettings()

    def save(self, settings: StitchSettings) -> None:
        write_json_safe(asdict(settings), self.config_path)
        self._settings = settings

        # queue limits are read when the default queue is built
        from ..queue.request_queue import reset_ai_queue

        reset_ai_queue()

    def get(self, key: str) -> Any:
        return getattr(self.load(), key, None)

    # * Update one key; the full settings object is rebuilt so validation runs before writing
    def set(self, key: str, value: Any) -> None:
        if key not in {f.name for f in fields(StitchSettings)}:
            raise ValueError(f"Unknown setting: {key}")
        self.save(StitchSettings(**{**asdict(self.load()), key: value}))

    def reset(self) -> None:
        self.save(StitchSettings())

    def list_settings(self) -> Dict[str, Any]:
        return asdict(self.load())


settings_manager = SettingsManager()


# * Settings injected on the Typer context (this one or any parent), else the global manager's
def get_settings(ctx: typer.Context, provided: Optional[StitchSettings] = None) -> StitchSettings:
    if provided is not None:
        return provided

    current: Optional[typer.Context] = ctx
    while current is not None:
        obj = getattr(current, "obj", None)
        if isinstance(obj, StitchSettings):
            return obj
        current = getattr(current, "parent", None)

    return settings_manager.load()
