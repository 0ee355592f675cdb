"""flowctl core: shared config, errors, and logging."""
from __future__ import annotations

from flowctl_core.config import (
    AgentsConfig,
    ExecutorConfig,
    FlowctlConfig,
    LoggingConfig,
)
from flowctl_core.errors import (
    AgentError,
    AgentNotFoundError,
    ConfigError,
    ExecutorError,
    FlowctlError,
    ScanTimeoutError,
)
from flowctl_core.logging import get_logger, setup_from_config, setup_logging

__version__ = "0.1.0"

__all__ = [
    # Errors
    "AgentError",
    "AgentNotFoundError",
    # Config
    "AgentsConfig",
    "ConfigError",
    "ExecutorConfig",
    "ExecutorError",
    "FlowctlConfig",
    "FlowctlError",
    "LoggingConfig",
    "ScanTimeoutError",
    # Version
    "__version__",
    # Logging
    "get_logger",
    "setup_from_config",
    "setup_logging",
]
