"""Mesh generation configuration and logging setup."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value not in (None, "") else default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value not in (None, "") else default


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value in (None, ""):
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class MeshConfig:
    """Tunable parameters for wall and floor mesh generation."""

    # Spec defaults
    default_thickness: float = 0.2  # meters
    default_height: float = 3.0  # meters
    floor_depth: float = 0.1  # meters

    # Straight (mitered) walls
    miter_limit: float = 3.0  # multiples of half thickness
    reflex_cos_threshold: float = -0.99

    # Curved walls
    spline_samples_per_point: int = 12

    # Input cleanup and validation
    dedupe_tolerance: float = 1e-6
    min_dimension: float = 1e-3
    clamp_parameters: bool = False

    # Memoization
    cache_size: int = 128

    # Cap triangulation engine passed to trimesh
    triangulation_engine: str = "earcut"

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "MeshConfig":
        """Load configuration from environment variables (and a .env file)."""
        load_dotenv(dotenv_path)
        return cls(
            default_thickness=_env_float("WALLMESH_DEFAULT_THICKNESS", 0.2),
            default_height=_env_float("WALLMESH_DEFAULT_HEIGHT", 3.0),
            floor_depth=_env_float("WALLMESH_FLOOR_DEPTH", 0.1),
            miter_limit=_env_float("WALLMESH_MITER_LIMIT", 3.0),
            reflex_cos_threshold=_env_float("WALLMESH_REFLEX_COS_THRESHOLD", -0.99),
            spline_samples_per_point=_env_int("WALLMESH_SPLINE_SAMPLES_PER_POINT", 12),
            dedupe_tolerance=_env_float("WALLMESH_DEDUPE_TOLERANCE", 1e-6),
            min_dimension=_env_float("WALLMESH_MIN_DIMENSION", 1e-3),
            clamp_parameters=_env_bool("WALLMESH_CLAMP_PARAMETERS", False),
            cache_size=_env_int("WALLMESH_CACHE_SIZE", 128),
            triangulation_engine=os.getenv("WALLMESH_TRIANGULATION_ENGINE", "earcut"),
        )


def configure_logging(level: int = logging.INFO) -> None:
    """Configure root logging with the project's standard format."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
