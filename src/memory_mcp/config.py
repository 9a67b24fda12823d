"""Configuration and settings module for Memory MCP.

Provides the :class:`MemoryConfig` class which centralises all configuration
for the memory server.  Configuration is resolved in priority order:

1. **Environment variables** (highest priority) -- ``MEMORY_MCP_*``
2. **Config file** -- a JSON object file given explicitly or via
   ``MEMORY_MCP_CONFIG``
3. **Defaults** (lowest priority)

Typical usage::

    config = MemoryConfig.load()                           # env + defaults
    config = MemoryConfig.load("/path/to/config.json")     # explicit file
    config = MemoryConfig(memory_file="/tmp/memories.md")  # programmatic

    print(config.memory_file)   # resolved absolute path to the backing file
    print(config.log_level)     # "INFO"  (or overridden value)
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Default name of the backing file, resolved against the working directory.
DEFAULT_MEMORY_FILE = "memories.md"

# Environment variable prefix.  ``MEMORY_MCP_MEMORY_FILE`` overrides
# ``memory_file`` and so on.
ENV_PREFIX = "MEMORY_MCP_"

# Environment variable naming a JSON config file.
CONFIG_ENV_VAR = f"{ENV_PREFIX}CONFIG"

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

# ---------------------------------------------------------------------------
# Configuration model
# ---------------------------------------------------------------------------


class MemoryConfig(BaseModel):
    """Centralised configuration for the memory server.

    Attributes
    ----------
    memory_file:
        Path to the markdown file holding the memory log.  Relative paths
        are resolved against the current working directory.
    log_level:
        Python logging level name.  One of ``DEBUG``, ``INFO``, ``WARNING``,
        ``ERROR``, ``CRITICAL``.
    """

    memory_file: str = Field(
        default=DEFAULT_MEMORY_FILE,
        min_length=1,
        description="Path to the append-only markdown memory file.",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL.",
    )

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def resolve_memory_file(self) -> "MemoryConfig":
        """Resolve ``memory_file`` to an absolute path."""
        self.memory_file = str(Path(self.memory_file).expanduser().resolve())
        return self

    @model_validator(mode="after")
    def validate_log_level(self) -> "MemoryConfig":
        """Normalise and validate the log level string."""
        normalised = self.log_level.upper().strip()
        if normalised not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level '{self.log_level}'. "
                f"Must be one of: {', '.join(sorted(VALID_LOG_LEVELS))}."
            )
        self.log_level = normalised
        return self

    # ------------------------------------------------------------------
    # Factory: load from file + environment
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "MemoryConfig":
        """Load configuration with full resolution: env -> file -> defaults.

        Parameters
        ----------
        config_path:
            Explicit path to a JSON config file.  When *None*, the
            ``MEMORY_MCP_CONFIG`` environment variable is consulted; when
            that is unset too, only environment overrides and defaults apply.
        """
        if config_path is None:
            config_path = os.environ.get(CONFIG_ENV_VAR)

        merged: dict = {}
        if config_path:
            merged.update(_load_config_file(config_path))
        merged.update(_load_env_overrides())

        return cls.model_validate(merged)

    # ------------------------------------------------------------------
    # Utility
    # ------------------------------------------------------------------

    def configure_logging(self) -> None:
        """Apply the configured log level to the ``memory_mcp`` logger.

        Log records go to stderr; stdout carries the stdio transport and
        must stay clean.  Calling this more than once is safe.
        """
        pkg_logger = logging.getLogger("memory_mcp")
        pkg_logger.setLevel(self.log_level)

        if not pkg_logger.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(self.log_level)
            formatter = logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
            handler.setFormatter(formatter)
            pkg_logger.addHandler(handler)
        else:
            for handler in pkg_logger.handlers:
                handler.setLevel(self.log_level)


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _load_config_file(config_path: str) -> dict:
    """Read a JSON config file and return its contents as a dict.

    Returns an empty dict if the file does not exist or is malformed.
    """
    path = Path(config_path).expanduser().resolve()

    if not path.is_file():
        logger.debug("No config file at %s. Using defaults.", path)
        return {}

    try:
        with open(path, "r", encoding="utf-8") as fp:
            data = json.load(fp)
    except json.JSONDecodeError:
        logger.warning(
            "Config file %s contains invalid JSON. Ignoring.",
            path,
            exc_info=True,
        )
        return {}
    except OSError:
        logger.warning(
            "Could not read config file %s. Ignoring.",
            path,
            exc_info=True,
        )
        return {}

    if not isinstance(data, dict):
        logger.warning(
            "Config file %s does not contain a JSON object. Ignoring.",
            path,
        )
        return {}

    logger.info("Loaded configuration from %s", path)
    return data


def _load_env_overrides() -> dict:
    """Read ``MEMORY_MCP_*`` environment variables and return overrides.

    Supported variables:

    - ``MEMORY_MCP_MEMORY_FILE`` -- override memory_file
    - ``MEMORY_MCP_LOG_LEVEL`` -- override log_level
    """
    overrides: dict = {}

    memory_file = os.environ.get(f"{ENV_PREFIX}MEMORY_FILE")
    if memory_file:
        overrides["memory_file"] = memory_file

    log_level = os.environ.get(f"{ENV_PREFIX}LOG_LEVEL")
    if log_level:
        overrides["log_level"] = log_level

    if overrides:
        logger.info(
            "Environment overrides applied: %s",
            ", ".join(overrides.keys()),
        )

    return overrides
