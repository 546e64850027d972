import pytest
import structlog

from asyncfsm import EngineSettings
from asyncfsm.infrastructure.observability.logging import metrics


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings(trace_transitions=True, collect_metrics=False)


@pytest.fixture
def metered_settings() -> EngineSettings:
    return EngineSettings(trace_transitions=True, collect_metrics=True)


@pytest.fixture(autouse=True)
def _clean_observability():
    """Keep the global metrics collector and log context per-test."""
    metrics.reset()
    yield
    metrics.reset()
    structlog.contextvars.clear_contextvars()
