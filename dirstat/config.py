from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path


CONFIG_FILENAME = ".dirstat.json"
LOG_LEVEL_ENV = "DIRSTAT_LOG_LEVEL"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(slots=True)
class DirStatConfig:
    include: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)
    log_level: str = "WARNING"


def config_path(base_dir: Path | None = None) -> Path:
    return (base_dir or Path.cwd()).resolve() / CONFIG_FILENAME


def default_log_level() -> str:
    return normalize_log_level(os.getenv(LOG_LEVEL_ENV, "") or "WARNING")


def normalize_log_level(value: str) -> str:
    level = (value or "").strip().upper()
    if level not in LOG_LEVELS:
        raise ValueError(
            f"Invalid log level {value!r}. Use one of: {', '.join(LOG_LEVELS)}."
        )
    return level


def _pattern_list(data: dict, key: str, path: Path) -> list[str]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"Config file {path}: `{key}` must be a list of strings.")
    return list(value)


def load_config(base_dir: Path | None = None) -> DirStatConfig:
    path = config_path(base_dir)
    if not path.exists():
        return DirStatConfig(log_level=default_log_level())

    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Config file {path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object.")

    log_level = data.get("log_level") or default_log_level()
    if not isinstance(log_level, str):
        raise ValueError(f"Config file {path}: `log_level` must be a string.")

    return DirStatConfig(
        include=_pattern_list(data, "include", path),
        exclude=_pattern_list(data, "exclude", path),
        log_level=normalize_log_level(log_level),
    )


def save_config(config: DirStatConfig, base_dir: Path | None = None) -> Path:
    path = config_path(base_dir)
    payload = asdict(config)
    payload["log_level"] = normalize_log_level(str(payload["log_level"]))
    with path.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2)
        fh.write("\n")
    return path
