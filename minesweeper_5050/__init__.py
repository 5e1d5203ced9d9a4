"""
Minesweeper 50/50 Detector

Finds forced guesses in a map of per-cell mine probabilities:
- Board snapshot: validated "<row>,<col>" -> probability input with adjacency queries
- Pattern detection: connected clusters of N cells each at probability 1/N
  (canonically, two adjacent cells at 0.5)
- Analysis: text and matplotlib rendering, summaries, planted-pair benchmark
"""

from .board import BoardSnapshot
from .detector import (
    CellOutcome,
    DetectionReport,
    DetectorConfig,
    PatternDetector,
    detect_5050_groups,
    find_5050_situations_from_dict,
)
from .errors import FormatError, FormatErrorKind, MalformedKeyError, OutOfRangeError
from .analysis import (
    format_probability_map,
    generate_probability_map,
    plot_probability_map,
    run_detection_benchmark,
    summarize_detection,
)
from .utils import KEY_FORMAT_VERSION, format_coordinate, parse_coordinate, reject_duplicate_keys

__version__ = "1.0.0"

__all__ = [
    # Core classes
    "BoardSnapshot",
    "PatternDetector",
    "DetectorConfig",
    "DetectionReport",
    "CellOutcome",
    # Boundary functions
    "detect_5050_groups",
    "find_5050_situations_from_dict",
    # Errors
    "FormatError",
    "FormatErrorKind",
    "MalformedKeyError",
    "OutOfRangeError",
    # Coordinates
    "KEY_FORMAT_VERSION",
    "parse_coordinate",
    "format_coordinate",
    "reject_duplicate_keys",
    # Analysis functions
    "format_probability_map",
    "summarize_detection",
    "plot_probability_map",
    "generate_probability_map",
    "run_detection_benchmark",
]
