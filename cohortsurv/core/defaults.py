"""
Default analysis settings.

This module is the SINGLE SOURCE OF TRUTH for option defaults.
Public functions take these as keyword defaults; import from here,
never repeat the literal values.
"""

# Two-sided confidence level for survival bounds
DEFAULT_CONF_LEVEL = 0.95

# CI transformation for survival bounds: "log-log", "log" or "plain"
DEFAULT_CONF_TYPE = "log-log"

# Normal quantile used for the default 95% bounds
DEFAULT_Z = 1.96

# Significance threshold for the log-rank test
DEFAULT_ALPHA = 0.05

# Number of equal intervals used when at-risk checkpoints are generated
DEFAULT_N_INTERVALS = 6

# Survival level read off the curve as the median
MEDIAN_THRESHOLD = 0.5

CONF_TYPES = frozenset({"log-log", "log", "plain"})

__all__ = [
    'DEFAULT_CONF_LEVEL',
    'DEFAULT_CONF_TYPE',
    'DEFAULT_Z',
    'DEFAULT_ALPHA',
    'DEFAULT_N_INTERVALS',
    'MEDIAN_THRESHOLD',
    'CONF_TYPES',
]
