from collections.abc import Iterator

import pytest

from survey_mapper.domain.entities import AutoMappingConfig, StandardizedMapping
from survey_mapper.infrastructure.logging import NullLogger
from survey_mapper.infrastructure.workers import ExecutionHost

SETTINGS_ENV_VARS = (
    "MAPPING_STORE_PATH",
    "MIN_CONFIDENCE",
    "SIMILARITY_METRIC",
    "PROGRESS_EVERY",
    "MAX_WORKERS",
    "USE_PROCESSES",
)


@pytest.fixture(autouse=True)
def _isolated_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of settings-dependent tests."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config() -> AutoMappingConfig:
    return AutoMappingConfig(confidence_threshold=0.8)


@pytest.fixture
def cardiology() -> StandardizedMapping:
    return StandardizedMapping(id="cardiology", standardized_name="Cardiology")


@pytest.fixture
def host() -> Iterator[ExecutionHost]:
    with ExecutionHost(logger=NullLogger(), poll_interval=0.01) as execution_host:
        yield execution_host
