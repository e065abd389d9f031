"""Interpolation of volume data to targets during an evolution.

Actors:
    InterpolationTarget: queue of temporal ids, point computation, value collection
    Interpolator: volume-data buffer, interpolation, clean-up barrier

Modules:
    runtime: named actors and per-sender FIFO message channels
    irregular_interpolant: tensor-product interpolation to arbitrary points
    target_points: LineSegment, WedgeSectionTorus and SpecifiedPoints options
    system: assembly of targets, interpolators and elements
"""

from .runtime import Actor, Message, Runtime
from .irregular_interpolant import IrregularInterpolant
from .target_points import LineSegment, SpecifiedPoints, WedgeSectionTorus
from .target import InterpolationTarget, TemporalIdState
from .interpolator import InterpolatedVarsHolder, Interpolator, PointInfo
from .system import InterpolationSystem, make_interpolation_system

__all__ = [
    # Runtime
    "Actor",
    "Message",
    "Runtime",
    # Interpolation
    "IrregularInterpolant",
    # Target points
    "LineSegment",
    "WedgeSectionTorus",
    "SpecifiedPoints",
    # Actors
    "InterpolationTarget",
    "TemporalIdState",
    "Interpolator",
    "InterpolatedVarsHolder",
    "PointInfo",
    # Assembly
    "InterpolationSystem",
    "make_interpolation_system",
]
