"""Configuration of interpolation targets."""
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Tuple

import pandas as pd


@dataclass(frozen=True)
class InterpolationTargetInfo:
    """Configuration of one interpolation target.

    Parameters
    ----------
    tag : str
        Name of the target. Must be unique among the targets of a run.
    target_points : LineSegment, WedgeSectionTorus or SpecifiedPoints
        Option holder whose ``points()`` gives the target points.
    vars_to_interpolate : tuple of str
        Names of the volume variables interpolated to the target.
    post_interpolation_callback : callable, optional
        Called as ``callback(result)`` with the `InterpolationResult` once all
        points have been filled for a temporal id. Default is None.
    """
    tag: str
    target_points: Any
    vars_to_interpolate: Tuple[str, ...] = ("u",)
    post_interpolation_callback: Optional[Callable] = field(default=None, compare=False)

    def __post_init__(self):
        if not self.tag:
            raise ValueError("Interpolation target needs a non-empty tag")
        if isinstance(self.vars_to_interpolate, str):
            object.__setattr__(self, "vars_to_interpolate", (self.vars_to_interpolate,))
        else:
            object.__setattr__(self, "vars_to_interpolate", tuple(self.vars_to_interpolate))
        if not self.vars_to_interpolate:
            raise ValueError(f"Interpolation target {self.tag!r} has no variables to interpolate")

    def to_dataframe(self) -> pd.DataFrame:
        """Single-row DataFrame with the target configuration."""
        return pd.DataFrame(
            [
                {
                    "tag": self.tag,
                    "target_points": type(self.target_points).__name__,
                    "vars_to_interpolate": ",".join(self.vars_to_interpolate),
                }
            ]
        )
