"""Utilities for convergence studies and plotting."""

from pathlib import Path

from .convergence import convergence_table
from .plotting import plot_convergence


def get_project_root():
    """Return the repository root (the directory holding ``src``)."""
    return Path(__file__).resolve().parents[2]


__all__ = ["get_project_root", "convergence_table", "plot_convergence"]
