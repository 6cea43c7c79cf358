"""Configuration loader from YAML files.

All settings have defaults; a YAML file only needs the values it overrides:

    filter:
      stopband_attenuation_db: 80
      zero_crossings: 5
      resolution_bits: 9
    logging:
      log_level: INFO
      log_format: console
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
import yaml

from bandlimit.core.constants import FilterConstants


logger = structlog.get_logger(__name__)

LOG_FORMATS = ("console", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class FilterConfig:
    """Interpolation filter design.

    Fields:
        stopband_attenuation_db: Sidelobe attenuation used to pick the Kaiser shape
        zero_crossings: Sinc zero-crossings kept on each side of centre
        resolution_bits: log2 of the table entries per zero-crossing
    """

    stopband_attenuation_db: float = FilterConstants.STOPBAND_ATTENUATION_DB
    zero_crossings: int = FilterConstants.ZERO_CROSSINGS
    resolution_bits: int = FilterConstants.RESOLUTION_BITS

    @property
    def samples_per_crossing(self) -> int:
        """Table entries per zero-crossing (L)."""
        return 1 << self.resolution_bits

    @property
    def table_length(self) -> int:
        """Filter table length (L * N_z + 1)."""
        return self.samples_per_crossing * self.zero_crossings + 1

    def validate(self) -> None:
        """Check value types and ranges.

        Raises:
            ValueError: If any field has the wrong type or is out of range
        """
        if not _is_number(self.stopband_attenuation_db):
            raise ValueError(
                f"stopband_attenuation_db must be a number, got {self.stopband_attenuation_db!r}"
            )
        for name in ("zero_crossings", "resolution_bits"):
            value = getattr(self, name)
            if not _is_int(value):
                raise ValueError(f"{name} must be an integer, got {value!r}")

        if self.stopband_attenuation_db < 0:
            raise ValueError(
                f"stopband_attenuation_db must be non-negative, got {self.stopband_attenuation_db}"
            )
        if self.zero_crossings <= 0:
            raise ValueError(f"zero_crossings must be positive, got {self.zero_crossings}")
        if not 1 <= self.resolution_bits <= 16:
            raise ValueError(f"resolution_bits must be in [1, 16], got {self.resolution_bits}")


@dataclass
class LoggingConfig:
    """Log output settings."""

    log_level: str = "WARNING"
    log_format: str = "console"

    def validate(self) -> None:
        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}, got {self.log_level!r}")
        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {LOG_FORMATS}, got {self.log_format!r}")


@dataclass
class Config:
    """Top-level configuration."""

    filter: FilterConfig = field(default_factory=FilterConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, file_path: str | Path) -> "Config":
        """Load configuration from YAML file.

        Args:
            file_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            ValueError: If YAML file is invalid
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"Config file not found: {file_path}")

        logger.info("Loading config from YAML", file_path=str(file_path))

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML file: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError("YAML file must contain a dictionary")

        filter_config = FilterConfig(**_section(data, "filter", FilterConfig))
        logging_config = LoggingConfig(**_section(data, "logging", LoggingConfig))
        filter_config.validate()
        logging_config.validate()

        logger.info(
            "Config loaded successfully",
            stopband_db=filter_config.stopband_attenuation_db,
            zero_crossings=filter_config.zero_crossings,
            resolution_bits=filter_config.resolution_bits
        )

        return cls(filter=filter_config, logging=logging_config)

    @classmethod
    def from_yaml_or_default(cls, file_path: Optional[str | Path]) -> "Config":
        """Load config from YAML file, or return defaults if no file given.

        A file that is given but fails to load raises; there is no fallback.
        """
        if not file_path:
            return cls()

        return cls.from_yaml(file_path)


def _section(data: Dict[str, Any], name: str, schema: type) -> Dict[str, Any]:
    """Extract one YAML section, rejecting unknown keys."""
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"'{name}' section must be a dictionary")

    known = {f.name for f in fields(schema)}
    unknown = set(section) - known
    if unknown:
        raise ValueError(f"Unknown keys in '{name}' section: {', '.join(sorted(unknown))}")

    return section


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return _is_int(value) or isinstance(value, float)
