"""Lift Planner - next-session load recommendations for strength training."""

import importlib.metadata

try:
    __version__ = importlib.metadata.version("lift-planner")
except importlib.metadata.PackageNotFoundError:
    __version__ = "unknown"
