from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from flowctl_core.errors import ConfigError


def _load_toml(path: Path) -> dict:
    """Load a TOML file, returning empty dict if missing or unreadable."""
    if not path.exists():
        return {}
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Merge override into base (1 level deep for TOML sections)."""
    merged = dict(base)
    for key, val in override.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(val, dict)
        ):
            merged[key] = {**merged[key], **val}
        else:
            merged[key] = val
    return merged


@dataclass(frozen=True, slots=True)
class AgentsConfig:
    custom_dir: str = ".claude-flow/agents"
    project_dir: str = ".claude/agents"
    cache_ttl_seconds: float = 60.0
    scan_timeout_seconds: float | None = None


@dataclass(frozen=True, slots=True)
class ExecutorConfig:
    command: list[str] = field(
        default_factory=lambda: ["npx", "agentic-flow"]
    )
    timeout_seconds: float = 300.0
    default_provider: str = "anthropic"


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    level: str = "WARNING"
    json: bool = False


@dataclass(frozen=True, slots=True)
class FlowctlConfig:
    """Top-level configuration, parsed from flowctl.toml."""
    agents: AgentsConfig = field(default_factory=AgentsConfig)
    executor: ExecutorConfig = field(default_factory=ExecutorConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_toml(
        cls, path: Path | str = "flowctl.toml"
    ) -> FlowctlConfig:
        path = Path(path)
        raw = _load_toml(path)
        return cls._from_raw(raw)

    @classmethod
    def load(
        cls, project_dir: Path | str | None = None
    ) -> FlowctlConfig:
        """Load config with global → project layering.

        Resolution order (later wins):
        1. Built-in defaults
        2. ~/.flowctl/config.toml (global)
        3. .flowctl/config.toml or flowctl.toml (project)
        """
        project_dir = (
            Path.cwd() if project_dir is None else Path(project_dir)
        )

        global_raw = _load_toml(global_config_path())
        project_raw = _load_toml(project_config_path(project_dir))
        merged = _deep_merge(global_raw, project_raw)

        return cls._from_raw(merged)

    @classmethod
    def _from_raw(cls, raw: dict) -> FlowctlConfig:
        """Build FlowctlConfig from a raw TOML dict.

        Raises:
            ConfigError: If a section is not a table or a known key has
                a value of the wrong type.
        """
        agents_raw = _section(raw, "agents", AgentsConfig)
        executor_raw = _section(raw, "executor", ExecutorConfig)
        logging_raw = _section(raw, "logging", LoggingConfig)

        command = executor_raw.get("command")
        if isinstance(command, str):
            executor_raw["command"] = command.split()
        executor = ExecutorConfig(**executor_raw)
        if not executor.command:
            msg = "executor.command must not be empty"
            raise ConfigError(msg)

        agents = AgentsConfig(**agents_raw)
        if agents.cache_ttl_seconds < 0:
            msg = "agents.cache_ttl_seconds must be >= 0"
            raise ConfigError(msg)

        return cls(
            agents=agents,
            executor=executor,
            logging=LoggingConfig(**logging_raw),
        )


# Accepted TOML value types per known key; bool is rejected where a number
# is expected even though it subclasses int.
_NUMBER = (int, float)
_FIELD_TYPES: dict[str, dict[str, tuple[type, ...]]] = {
    "agents": {
        "custom_dir": (str,),
        "project_dir": (str,),
        "cache_ttl_seconds": _NUMBER,
        "scan_timeout_seconds": _NUMBER,
    },
    "executor": {
        "command": (list, str),
        "timeout_seconds": _NUMBER,
        "default_provider": (str,),
    },
    "logging": {
        "level": (str,),
        "json": (bool,),
    },
}


def _section(raw: dict, name: str, dc: type) -> dict:
    """Known keys of one TOML table, type-checked."""
    section = raw.get(name, {})
    if not isinstance(section, dict):
        msg = f"[{name}] must be a table, got {type(section).__name__}"
        raise ConfigError(msg)

    fields = dc.__dataclass_fields__
    picked = {k: v for k, v in section.items() if k in fields}
    for key, value in picked.items():
        expected = _FIELD_TYPES[name][key]
        wrong = not isinstance(value, expected) or (
            isinstance(value, bool) and bool not in expected
        )
        if key == "command" and isinstance(value, list):
            wrong = wrong or not all(isinstance(part, str) for part in value)
        if wrong:
            msg = (
                f"{name}.{key} has invalid value {value!r} "
                f"({type(value).__name__})"
            )
            raise ConfigError(msg)
    return picked


def global_config_path() -> Path:
    return Path.home() / ".flowctl" / "config.toml"


def project_config_path(project_dir: Path) -> Path:
    """Project config: .flowctl/config.toml takes priority over flowctl.toml."""
    path = project_dir / ".flowctl" / "config.toml"
    if not path.exists():
        path = project_dir / "flowctl.toml"
    return path
