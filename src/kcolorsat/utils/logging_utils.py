"""
Logging utilities for kcolorsat.

Provides logging setup driven by the configuration and JSON Lines records
for enumeration results.
"""

import json
import logging
import os
from typing import Any

import numpy as np

from ..config import SolverConfig, get_config


class NumpyJSONEncoder(json.JSONEncoder):
    """JSON encoder that can handle NumPy arrays and scalars."""

    def default(self, obj):
        """Convert numpy objects to standard Python types."""
        if isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        elif isinstance(obj, (set, frozenset)):
            return sorted(obj)
        return super().default(obj)


def setup_logging(config: SolverConfig | None = None) -> logging.Logger:
    """
    Configure the ``kcolorsat`` logger from the ``logging`` config section.

    Args:
        config: Configuration to read; the global one when omitted

    Returns:
        The package logger
    """
    config = config or get_config()
    level = config.get("logging.level", "INFO")
    fmt = config.get("logging.format")
    log_file = config.get("logging.file")

    package_logger = logging.getLogger("kcolorsat")
    package_logger.setLevel(level)
    package_logger.propagate = False

    # Replace handlers installed by an earlier call
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    handler = logging.FileHandler(log_file) if log_file else logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))
    package_logger.addHandler(handler)

    return package_logger


def log_metrics_jsonl(path: str, metrics: dict[str, Any]) -> None:
    """Append a row of metrics to a JSONL file."""
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    with open(path, "a") as f:
        f.write(json.dumps(metrics, cls=NumpyJSONEncoder) + "\n")
