from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import os
from pathlib import Path
import tomllib
from typing import cast
import warnings

from .constants import Defaults
from .domain.entities.auto_mapping_config import AutoMappingConfig, SimilarityMetric


@dataclass(frozen=True, slots=True)
class MapperSettings:
    store_path: Path = field(default_factory=lambda: Path(Defaults.STORE_PATH))
    min_confidence: float = Defaults.CONFIDENCE_THRESHOLD
    similarity_metric: str = Defaults.SIMILARITY_METRIC
    progress_every: int = Defaults.PROGRESS_EVERY
    max_workers: int = Defaults.MAX_WORKERS
    use_processes: bool = Defaults.USE_PROCESSES

    def __post_init__(self) -> None:
        if not 0.0 <= self.min_confidence <= 1.0:
            raise ValueError(
                f"min_confidence must be between 0.0 and 1.0, got {self.min_confidence}"
            )
        if self.progress_every < 1:
            raise ValueError(
                f"progress_every must be positive, got {self.progress_every}"
            )
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")
        if self.similarity_metric not in {m.value for m in SimilarityMetric}:
            raise ValueError(f"Unknown similarity_metric: {self.similarity_metric}")

    @classmethod
    def from_env(cls) -> MapperSettings:
        return cls(
            store_path=Path(os.getenv("MAPPING_STORE_PATH", Defaults.STORE_PATH)),
            min_confidence=float(
                os.getenv("MIN_CONFIDENCE", str(Defaults.CONFIDENCE_THRESHOLD))
            ),
            similarity_metric=os.getenv(
                "SIMILARITY_METRIC", Defaults.SIMILARITY_METRIC
            ),
            progress_every=int(
                os.getenv("PROGRESS_EVERY", str(Defaults.PROGRESS_EVERY))
            ),
            max_workers=int(os.getenv("MAX_WORKERS", str(Defaults.MAX_WORKERS))),
            use_processes=_env_flag("USE_PROCESSES", default=Defaults.USE_PROCESSES),
        )

    def auto_mapping_config(self, **overrides: object) -> AutoMappingConfig:
        values: dict[str, object] = {
            "confidence_threshold": self.min_confidence,
            "similarity_metric": self.similarity_metric,
        }
        values.update(overrides)
        return AutoMappingConfig.from_mapping(values)


class ConfigLoader:
    pass

    @staticmethod
    def load(config_file: Path | None = None) -> MapperSettings:
        settings = MapperSettings.from_env()
        if config_file is None:
            config_file = Path(Defaults.CONFIG_FILE)
        if config_file.exists():
            try:
                settings = ConfigLoader._load_from_toml(config_file, settings)
            except Exception as e:
                warnings.warn(
                    f"Failed to load config from {config_file}: {e}", stacklevel=2
                )
        return settings

    @staticmethod
    def _load_from_toml(config_file: Path, base: MapperSettings) -> MapperSettings:
        with config_file.open("rb") as handle:
            data = tomllib.load(handle)
        paths = _get_table(data, "paths")
        default_section = _get_table(data, "default")
        worker_section = _get_table(data, "worker")
        store_path = base.store_path
        if value := paths.get("store_path"):
            store_path = Path(str(value))
        min_confidence = base.min_confidence
        if (value := default_section.get("min_confidence")) is not None:
            min_confidence = _coerce_float(value, key="default.min_confidence")
        similarity_metric = base.similarity_metric
        if (value := default_section.get("similarity_metric")) is not None:
            similarity_metric = str(value)
        progress_every = base.progress_every
        if (value := worker_section.get("progress_every")) is not None:
            progress_every = _coerce_int(value, key="worker.progress_every")
        max_workers = base.max_workers
        if (value := worker_section.get("max_workers")) is not None:
            max_workers = _coerce_int(value, key="worker.max_workers")
        use_processes = base.use_processes
        if (value := worker_section.get("use_processes")) is not None:
            use_processes = bool(value)
        return MapperSettings(
            store_path=store_path,
            min_confidence=min_confidence,
            similarity_metric=similarity_metric,
            progress_every=progress_every,
            max_workers=max_workers,
            use_processes=use_processes,
        )


def _env_flag(name: str, *, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _get_table(data: Mapping[str, object], key: str) -> Mapping[str, object]:
    value = data.get(key)
    if isinstance(value, Mapping):
        return cast("Mapping[str, object]", value)
    return {}


def _coerce_float(value: object, *, key: str) -> float:
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        return float(value)
    raise ValueError(f"{key} must be numeric or string, got {type(value).__name__}")


def _coerce_int(value: object, *, key: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an int, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        return int(value)
    raise ValueError(f"{key} must be int-like or string, got {type(value).__name__}")
