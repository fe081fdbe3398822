"""
Core module - shared data types, utilities, and configuration.
"""
from .types import (
    BULL,
    CRICKET_NUMBERS,
    Segment,
    AimTarget,
    BoardGeometry,
    MISS,
    SINGLE_BULL,
    DOUBLE_BULL,
    create_segment,
    all_segments,
)
from .io_utils import (
    atomic_write_yaml,
    load_yaml,
    save_match_results,
)
from .config_loader import Config, DEFAULT_CONFIG_PATH

__all__ = [
    # Types
    "BULL",
    "CRICKET_NUMBERS",
    "Segment",
    "AimTarget",
    "BoardGeometry",
    "MISS",
    "SINGLE_BULL",
    "DOUBLE_BULL",
    "create_segment",
    "all_segments",
    # I/O
    "atomic_write_yaml",
    "load_yaml",
    "save_match_results",
    # Config
    "Config",
    "DEFAULT_CONFIG_PATH",
]
