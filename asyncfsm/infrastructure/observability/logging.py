import structlog
import logging
import sys
from typing import Dict, Any, Iterator, Optional, TYPE_CHECKING
from datetime import datetime, timezone

if TYPE_CHECKING:
    from asyncfsm.infrastructure.config import EngineSettings


def setup_logging(
    settings: Optional["EngineSettings"] = None,
    *,
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    service_name: Optional[str] = None,
    cache_loggers: bool = True,
) -> None:
    """Setup structured logging configuration

    The library never calls this on import. Applications embedding the engine
    call it once at startup; explicit keyword arguments win over ``settings``.
    """
    from asyncfsm.infrastructure.config import get_settings

    settings = settings or get_settings()
    log_level = log_level or settings.log_level
    log_format = log_format or settings.log_format
    service_name = service_name or settings.service_name

    # Configure Python logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO)
    )

    # Processors for structlog
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        add_machine_context,
    ]

    # Add appropriate renderer based on format
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=cache_loggers,
    )

    structlog.contextvars.bind_contextvars(service=service_name)


def get_logger(name: str):
    """Module logger backed by a stdlib logger of the same name.

    Until the host configures logging, records go through stdlib's default
    handling (WARNING and above to stderr); after setup_logging they run
    through the structlog processor chain.
    """
    return structlog.wrap_logger(logging.getLogger(name))


def add_machine_context(logger: logging.Logger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add run context to all log entries"""

    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()

    context = structlog.contextvars.get_contextvars()

    service = context.get("service")
    if service:
        event_dict["service"] = service

    # Run ID is bound for the duration of a single run
    run_id = context.get("run_id")
    if run_id:
        event_dict["run_id"] = run_id

    machine = context.get("machine")
    if machine:
        event_dict["machine"] = machine

    return event_dict


class MachineLogger:
    """Specialized logger for state machine operations"""

    def __init__(self, name: str):
        self.logger = get_logger(name)

    def log_machine_event(
        self,
        event_type: str,
        machine: str,
        data: Optional[Dict[str, Any]] = None,
        **kwargs
    ):
        """Log machine lifecycle events (build, run start, run end)"""

        self.logger.info(
            "machine_event",
            event_type=event_type,
            machine=machine,
            data=data or {},
            **kwargs
        )

    def log_action_execution(
        self,
        state: str,
        duration_ms: float,
        success: bool = True,
        error: Optional[str] = None
    ):
        """Log a single action execution"""

        if success:
            self.logger.debug(
                "action_execution",
                state=state,
                duration_ms=duration_ms,
                success=success,
            )
        else:
            self.logger.warning(
                "action_execution",
                state=state,
                duration_ms=duration_ms,
                success=success,
                error=error
            )

    def log_state_transition(
        self,
        from_state: str,
        to_state: Optional[str],
        has_output: bool = False
    ):
        """Log state transitions; ``to_state`` is None on the terminal step"""

        self.logger.debug(
            "state_transition",
            from_state=from_state,
            to_state=to_state,
            terminal=to_state is None,
            has_output=has_output
        )


# Global logger instance
machine_logger = MachineLogger("asyncfsm")


class MetricsCollector:
    """In-process engine metrics.

    Every sample lands under its bare name and once more per tag, keyed
    ``name[tag=value]``, e.g. ``latency.action[state=fetch]``.
    """

    def __init__(self):
        self._latencies: Dict[str, Dict[str, float]] = {}
        self._counters: Dict[str, int] = {}

    def record_latency(self, operation: str, duration_ms: float, tags: Optional[Dict[str, str]] = None):
        """Record operation latency"""

        for key in _metric_keys(f"latency.{operation}", tags):
            stats = self._latencies.setdefault(
                key, {"count": 0, "sum": 0.0, "min": duration_ms, "max": duration_ms}
            )
            stats["count"] += 1
            stats["sum"] += duration_ms
            stats["min"] = min(stats["min"], duration_ms)
            stats["max"] = max(stats["max"], duration_ms)

        machine_logger.logger.debug(
            "metric",
            metric_type="latency",
            operation=operation,
            duration_ms=duration_ms,
            tags=tags or {}
        )

    def increment_counter(self, name: str, value: int = 1, tags: Optional[Dict[str, str]] = None):
        """Increment a counter metric"""

        for key in _metric_keys(name, tags):
            self._counters[key] = self._counters.get(key, 0) + value

        machine_logger.logger.debug(
            "metric",
            metric_type="counter",
            name=name,
            value=value,
            tags=tags or {}
        )

    def get_metrics_summary(self) -> Dict[str, Any]:
        """Counters as plain values, latencies as count/avg/min/max"""

        summary: Dict[str, Any] = dict(self._counters)
        for key, stats in self._latencies.items():
            summary[key] = {
                "count": stats["count"],
                "avg": stats["sum"] / stats["count"],
                "min": stats["min"],
                "max": stats["max"],
            }
        return summary

    def reset(self):
        """Drop all collected metrics"""
        self._latencies.clear()
        self._counters.clear()


def _metric_keys(name: str, tags: Optional[Dict[str, str]]) -> Iterator[str]:
    yield name
    for tag, value in sorted((tags or {}).items()):
        yield f"{name}[{tag}={value}]"


# Global metrics collector
metrics = MetricsCollector()
