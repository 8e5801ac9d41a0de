"""Persistent settings schema and load/save helpers."""

from __future__ import annotations

import json
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from stagefit_geometry import DEFAULT_STAGE_SIZE, FrameSize, StageContext, is_valid_stage_size
from stagefit_raster.codec import DEFAULT_CONTENT_TYPE, produced_content_type


CONFIG_VERSION = 2
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class StageConfig:
    width: float = DEFAULT_STAGE_SIZE.width
    height: float = DEFAULT_STAGE_SIZE.height


@dataclass
class ImportConfig:
    output_content_type: str = DEFAULT_CONTENT_TYPE


@dataclass
class LoggingConfig:
    keep_files: int = 7
    console: bool = True
    level: str = "INFO"


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    stage: StageConfig = field(default_factory=StageConfig)
    imports: ImportConfig = field(default_factory=ImportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def stage_context(self) -> StageContext:
        return StageContext(FrameSize(self.stage.width, self.stage.height))


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "StageFit"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "StageFit"
    return Path.home() / ".config" / "stagefit"


def config_path() -> Path:
    return config_root() / "config.json"


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()  # type: ignore[misc]
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _normalize_stage(cfg: AppConfig) -> None:
    if not is_valid_stage_size([cfg.stage.width, cfg.stage.height]):
        cfg.stage.width = DEFAULT_STAGE_SIZE.width
        cfg.stage.height = DEFAULT_STAGE_SIZE.height


def _normalize_imports(cfg: AppConfig) -> None:
    content_type = cfg.imports.output_content_type
    if not isinstance(content_type, str):
        content_type = DEFAULT_CONTENT_TYPE
    cfg.imports.output_content_type = produced_content_type(content_type)


def _normalize_logging(cfg: AppConfig) -> None:
    cfg.logging.keep_files = max(2, int(cfg.logging.keep_files))
    cfg.logging.console = bool(cfg.logging.console)
    level = str(cfg.logging.level).upper()
    cfg.logging.level = level if level in _LOG_LEVELS else "INFO"


def _migrate(raw: dict[str, Any]) -> dict[str, Any]:
    version = int(raw.get("config_version", 1))
    data = dict(raw)

    if version < 2:
        # v1 stored the stage as a bare [width, height] pair.
        legacy = data.pop("stage_native_size", None)
        stage = dict(data.get("stage", {}) or {})
        if isinstance(legacy, (list, tuple)) and len(legacy) == 2:
            stage.setdefault("width", legacy[0])
            stage.setdefault("height", legacy[1])
        data["stage"] = stage
        data.setdefault("imports", {})
        data.setdefault("logging", {})
        data["config_version"] = 2

    return data


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()

    data = _migrate(raw)
    cfg = AppConfig(
        config_version=int(data.get("config_version", CONFIG_VERSION)),
        stage=_merge(StageConfig, data.get("stage", {})),
        imports=_merge(ImportConfig, data.get("imports", {})),
        logging=_merge(LoggingConfig, data.get("logging", {})),
    )

    _normalize_stage(cfg)
    _normalize_imports(cfg)
    _normalize_logging(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
