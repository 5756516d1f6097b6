"""
Chunker configuration.

A ChunkerConfig holds the boundary parameters together with the precomputed
weight table used by the boundary detector. It is immutable once built, so a
single instance can be shared by any number of concurrent chunking calls.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from robin_chunking.core.exceptions import ConfigError, WindowTooLargeError

logger = logging.getLogger(__name__)

# Reference configuration
DEFAULT_PRIME = 3
DEFAULT_MIN_SIZE = 512
DEFAULT_MAX_SIZE = 2048
DEFAULT_AVG_SIZE = 1024
DEFAULT_WINDOW_SIZE = 31

UINT64_MASK = (1 << 64) - 1


def to_int64(value: int) -> int:
    """Reduce an integer to the signed 64-bit range with two's complement wraparound."""
    value &= UINT64_MASK
    if value >= 1 << 63:
        value -= 1 << 64
    return value


def _build_weights(prime: int, window_size: int) -> Tuple[int, ...]:
    """weights[i] = prime ** i for i in 0..window_size, wrapped to int64."""
    weights = []
    factor = 1
    for _ in range(window_size + 1):
        weights.append(factor)
        factor = to_int64(factor * prime)
    return tuple(weights)


@dataclass(frozen=True)
class ChunkerConfig:
    """
    Validated chunking parameters.

    Attributes:
        prime: Multiplier the weight table is built from
        min_size: Smallest chunk a natural boundary may produce
        max_size: Chunks are cut unconditionally at this length
        avg_size: Modulus of the boundary test
        window_size: Number of trailing bytes in each boundary test
        residue: Value ``checksum mod avg_size`` must equal at a boundary
        weights: ``prime ** i`` for ``i`` in ``0..window_size``

    Use :func:`configure` rather than instantiating this class directly.
    """

    prime: int
    min_size: int
    max_size: int
    avg_size: int
    window_size: int
    residue: int
    weights: Tuple[int, ...] = field(repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary (without the weight table)."""
        return {
            "prime": self.prime,
            "min_size": self.min_size,
            "max_size": self.max_size,
            "avg_size": self.avg_size,
            "window_size": self.window_size,
            "residue": self.residue,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChunkerConfig":
        """
        Build a configuration from a mapping.

        Unknown keys are ignored and missing keys take the reference values.
        A nested ``chunker`` section is used when present.
        """
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration must be a mapping, got {type(data).__name__}")

        section = data.get("chunker", data)
        if not isinstance(section, dict):
            raise ConfigError("'chunker' section must be a mapping")

        try:
            return configure(
                prime=int(section.get("prime", DEFAULT_PRIME)),
                min_size=int(section.get("min_size", DEFAULT_MIN_SIZE)),
                max_size=int(section.get("max_size", DEFAULT_MAX_SIZE)),
                avg_size=int(section.get("avg_size", DEFAULT_AVG_SIZE)),
                window_size=int(section.get("window_size", DEFAULT_WINDOW_SIZE)),
                residue=int(section["residue"]) if section.get("residue") is not None else None,
            )
        except ConfigError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration value: {e}") from e


def configure(
    prime: int = DEFAULT_PRIME,
    min_size: int = DEFAULT_MIN_SIZE,
    max_size: int = DEFAULT_MAX_SIZE,
    avg_size: int = DEFAULT_AVG_SIZE,
    window_size: int = DEFAULT_WINDOW_SIZE,
    residue: Optional[int] = None,
) -> ChunkerConfig:
    """
    Validate parameters and precompute the weight table.

    Args:
        prime: Weight multiplier (3 is the recommended value)
        min_size: Minimum chunk size in bytes
        max_size: Maximum chunk size in bytes
        avg_size: Boundary modulus, roughly the extra length past min_size a
            chunk runs before a natural boundary
        window_size: Boundary window in bytes (31 is the recommended value)
        residue: Boundary target residue; defaults to ``prime``

    Returns:
        Immutable ChunkerConfig

    Raises:
        WindowTooLargeError: If ``min_size <= window_size``

    ``max_size < min_size`` or ``avg_size <= 0`` are not rejected; chunking
    with such values is a caller error.
    """
    if min_size <= window_size:
        raise WindowTooLargeError(min_size, window_size)

    if residue is None:
        residue = prime

    config = ChunkerConfig(
        prime=prime,
        min_size=min_size,
        max_size=max_size,
        avg_size=avg_size,
        window_size=window_size,
        residue=residue,
        weights=_build_weights(prime, window_size),
    )
    logger.debug(f"Configured chunker: {config}")
    return config


def default_config() -> ChunkerConfig:
    """Reference configuration: prime=3, min=512, max=2048, avg=1024, win=31."""
    return configure()


def load_config(config_path: Union[str, Path]) -> ChunkerConfig:
    """
    Load a ChunkerConfig from a YAML or JSON file.

    Raises:
        ConfigError: If the file cannot be read, parsed, or validated
    """
    config_path = Path(config_path)
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.suffix.lower() in (".yaml", ".yml"):
                raw_config = yaml.safe_load(f)
            elif config_path.suffix.lower() == ".json":
                raw_config = json.load(f)
            else:
                raise ConfigError(f"Unsupported config file format: {config_path.suffix}")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot parse config file {config_path}: {e}") from e

    if raw_config is None:
        raw_config = {}

    logger.debug(f"Loaded configuration from {config_path}")
    return ChunkerConfig.from_dict(raw_config)
