"""
Configuration for the lzjd tool.

Settings come from (lowest to highest precedence) built-in defaults, a
YAML file, LZJD_* environment variables and command-line flags.
"""

import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .core.builders import BUILDERS, DEFAULT_STRATEGY
from .core.errors import ConfigurationError, WorkerPoolError
from .core.hashers import HASHERS, DEFAULT_HASHER

CONFIG_FILE_NAMES = [".lzjd.yml", ".lzjd.yaml", "lzjd.yml", "lzjd.yaml"]


@dataclass
class LZJDConfig:
    """Settings for digest generation and comparison."""

    # Only report pairs with similarity >= threshold (0-100)
    threshold: int = 1

    # Worker pool size; None means one worker per logical core
    workers: Optional[int] = None

    hasher: str = DEFAULT_HASHER
    strategy: str = DEFAULT_STRATEGY

    # Processes sidestep the GIL for the CPU-bound hashing and comparison
    use_processes: bool = True
    chunk_size: int = 1

    log_level: str = "WARNING"
    log_file: Optional[str] = None

    def validate(self) -> None:
        """
        Raises:
            ConfigurationError: a setting is out of range
            WorkerPoolError: workers is not a positive integer
        """
        if isinstance(self.threshold, bool) or not isinstance(self.threshold, int) \
                or not 0 <= self.threshold <= 100:
            raise ConfigurationError(f"threshold must be an integer between 0 and 100, got {self.threshold!r}")
        if self.workers is not None and (
                isinstance(self.workers, bool) or not isinstance(self.workers, int) or self.workers < 1):
            raise WorkerPoolError(f"ThreadPoolBuild error: workers must be a positive integer, got {self.workers!r}",
                                  workers=self.workers)
        if self.hasher not in HASHERS:
            raise ConfigurationError(f"hasher must be one of {sorted(HASHERS)}, got {self.hasher!r}")
        if self.strategy not in BUILDERS:
            raise ConfigurationError(f"strategy must be one of {sorted(BUILDERS)}, got {self.strategy!r}")
        if not isinstance(self.chunk_size, int) or self.chunk_size < 1:
            raise ConfigurationError(f"chunk_size must be >= 1, got {self.chunk_size!r}")
        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigurationError(f"log_level is not a logging level: {self.log_level!r}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LZJDConfig":
        """Create config from a (possibly partial) dict; unknown keys are rejected."""
        field_names = {f.name for f in fields(cls)}
        unknown = set(data) - field_names
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        cfg = cls(**data)
        cfg.validate()
        return cfg

    def merge(self, **overrides: Any) -> "LZJDConfig":
        """Return a copy with the non-None overrides applied."""
        data = self.to_dict()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return LZJDConfig.from_dict(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "LZJDConfig":
        """Load configuration from a YAML file."""
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigurationError(f"Could not read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")
        return cls.from_dict(data)

    @classmethod
    def find_and_load(cls, start_path: Optional[Path] = None) -> "LZJDConfig":
        """Find the nearest config file at or above start_path; defaults if none."""
        current = Path(start_path or Path.cwd()).resolve()

        while True:
            for name in CONFIG_FILE_NAMES:
                config_path = current / name
                if config_path.is_file():
                    return cls.from_file(config_path)
            if current == current.parent:
                break
            current = current.parent

        return cls()

    def apply_env(self, prefix: str = "LZJD_") -> "LZJDConfig":
        """
        Return a copy with environment overrides applied.
        Example vars:
          LZJD_THRESHOLD=50
          LZJD_WORKERS=8
          LZJD_HASHER=crc32
          LZJD_USE_PROCESSES=false
        """
        def get_int(name: str) -> Optional[int]:
            v = os.getenv(prefix + name)
            if v is None:
                return None
            try:
                return int(v)
            except ValueError:
                raise ConfigurationError(f"{prefix}{name} must be an integer, got {v!r}") from None

        def get_bool(name: str) -> Optional[bool]:
            v = os.getenv(prefix + name)
            if v is None:
                return None
            value = v.strip().lower()
            if value in ("1", "true", "yes", "on"):
                return True
            if value in ("0", "false", "no", "off"):
                return False
            raise ConfigurationError(f"{prefix}{name} must be a boolean, got {v!r}")

        def get_str(name: str) -> Optional[str]:
            return os.getenv(prefix + name)

        return self.merge(
            threshold=get_int("THRESHOLD"),
            workers=get_int("WORKERS"),
            hasher=get_str("HASHER"),
            strategy=get_str("STRATEGY"),
            use_processes=get_bool("USE_PROCESSES"),
            chunk_size=get_int("CHUNK_SIZE"),
            log_level=get_str("LOG_LEVEL"),
            log_file=get_str("LOG_FILE"),
        )

    @classmethod
    def from_env(cls, prefix: str = "LZJD_") -> "LZJDConfig":
        """Defaults plus environment overrides."""
        return cls().apply_env(prefix)


def load_config(config_path: Optional[Path] = None, start_path: Optional[Path] = None) -> LZJDConfig:
    """
    Resolve the effective configuration from file and environment.

    Args:
        config_path: Explicit config file; otherwise search from start_path
        start_path: Directory to start the search from (default: cwd)
    """
    if config_path is not None:
        config = LZJDConfig.from_file(config_path)
    else:
        config = LZJDConfig.find_and_load(start_path)
    return config.apply_env()
