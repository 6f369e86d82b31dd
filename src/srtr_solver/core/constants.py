"""
Configuration constants for SRTR Solver.

Solver display and conversion settings are loaded from constants.json if
available, otherwise default values are used.

The soft-constraint weight and the comparator set are fixed properties of the
tuning formulation and are not read from the file.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

# =============================================================================
# Load Settings from JSON
# =============================================================================

# Path to constants.json (same directory as this file)
_CONSTANTS_JSON_PATH = Path(__file__).parent / "constants.json"

# Default values (used if constants.json is missing or incomplete)
_DEFAULT_CONSTANTS: Dict[str, Any] = {
    "bound_precision": 5,  # decimal digits for irrational objective bounds
    "report_table_format": "grid",  # tabulate format for adjustment tables
    "show_smt2": True,  # print SMT2 problem text in verbose runs
    "variable_prefix": "eps_",  # solver-side name prefix for perturbations
}


def load_constants_from_json(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Read tuning display settings, falling back to the built-in defaults.

    Keys present in the file override the defaults one by one; keys the
    tuner does not know are reported and ignored.

    Args:
        path: Settings file to read (defaults to constants.json beside this
              module).

    Returns:
        Dictionary with every setting in ``_DEFAULT_CONSTANTS``.
    """
    path = _CONSTANTS_JSON_PATH if path is None else Path(path)
    settings = _DEFAULT_CONSTANTS.copy()
    if not path.exists():
        return settings
    try:
        with open(path, 'r', encoding='utf-8') as f:
            loaded = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        print(f"Warning: Failed to load tuning settings from {path}: {e}. Using defaults.")
        return settings
    if not isinstance(loaded, dict):
        print(f"Warning: Tuning settings in {path} must be a JSON object. Using defaults.")
        return settings
    for key, value in loaded.items():
        if key in settings:
            settings[key] = value
        else:
            print(f"Warning: Ignoring unknown tuning setting '{key}' in {path}")
    return settings


def get_constants_json_path() -> Path:
    """Location of the optional tuning settings file."""
    return _CONSTANTS_JSON_PATH


# Load settings at module import time
_LOADED_CONSTANTS = load_constants_from_json()

# =============================================================================
# Fixed Formulation Constants
# =============================================================================

# Every human-labelled transition counts the same in the MaxSMT objective.
SOFT_CONSTRAINT_WEIGHT: int = 1

# Only strict threshold comparisons are modelled.
SUPPORTED_COMPARATORS: Tuple[str, ...] = (">", "<")

# =============================================================================
# Configurable Settings (loaded from JSON or defaults)
# =============================================================================

BOUND_PRECISION: int = int(_LOADED_CONSTANTS["bound_precision"])

REPORT_TABLE_FORMAT: str = _LOADED_CONSTANTS["report_table_format"]

SHOW_SMT2: bool = bool(_LOADED_CONSTANTS["show_smt2"])

VARIABLE_PREFIX: str = _LOADED_CONSTANTS["variable_prefix"]
