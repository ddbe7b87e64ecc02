"""
Tangram Kernel - Configuration
All tolerances and scale settings in one place.

Nothing in the geometry packages reads a global configuration: a
Configuration value is built once (defaults, JSON file or CLI flags) and
passed explicitly to every tolerance-sensitive operation.
"""

from dataclasses import dataclass, asdict, fields
from typing import Dict, Any, Optional
import json
import math
import os


@dataclass(frozen=True)
class Configuration:
    """Geometry kernel parameters."""
    # Base scaling unit (1 tangram unit = 50 points on screen)
    unit: float = 50.0

    # Vertex matching tolerance for win detection / snapping (points)
    vertex_tolerance: float = 8.0

    # Minimum distance between distinct vertices (points)
    min_vertex_separation: float = 3.0

    # Rotation snap angle (15 degrees)
    rotation_snap: float = math.pi / 12.0

    # Intersection area above which two placed pieces overlap (square points)
    overlap_area_tolerance: float = 1.0

    def __post_init__(self):
        """Validate values (fail fast at startup)."""
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ValueError(f"{f.name} must be a finite number, got {value!r}")

        if self.unit <= 0:
            raise ValueError(f"unit must be positive, got {self.unit}")
        if self.vertex_tolerance < 0:
            raise ValueError(f"vertex_tolerance must be >= 0, got {self.vertex_tolerance}")
        if self.min_vertex_separation < 0:
            raise ValueError(
                f"min_vertex_separation must be >= 0, got {self.min_vertex_separation}"
            )
        if self.rotation_snap <= 0:
            raise ValueError(f"rotation_snap must be positive, got {self.rotation_snap}")
        if self.overlap_area_tolerance < 0:
            raise ValueError(
                f"overlap_area_tolerance must be >= 0, got {self.overlap_area_tolerance}"
            )

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'Configuration':
        """Build from a dict; unknown keys are ignored, missing keys default."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: float(v) for k, v in d.items() if k in known})


@dataclass
class BatchConfig:
    """Batch comparison runner configuration."""
    n_workers: Optional[int] = None  # None = auto (cpu_count)

    # Alignment search
    angle_steps: int = 72
    sample_density: int = 100

    # Similarity test (normalized, unit-area coordinates)
    similarity_tolerance: float = 1e-3

    # Verbosity
    verbose: bool = False
    progress_bar: bool = False


def load_config(path: str) -> Configuration:
    """
    Load a Configuration from a JSON file.

    Args:
        path: Path to a JSON object with any subset of Configuration fields

    Returns:
        Configuration
    """
    with open(path, 'r') as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")

    return Configuration.from_dict(data)


def save_config(config: Configuration, path: str):
    """Write a Configuration to a JSON file."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)
