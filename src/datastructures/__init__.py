"""Data structures for meshes, interpolation configuration and results.

This module defines the mesh descriptor consumed by the spectral operators,
the configuration of interpolation targets and the interpolation results.
"""

from .mesh import Mesh, Element
from .config import InterpolationTargetInfo
from .fields import InterpolationResult

__all__ = [
    # Discretization
    "Mesh",
    "Element",
    # Configuration
    "InterpolationTargetInfo",
    # Results
    "InterpolationResult",
]
