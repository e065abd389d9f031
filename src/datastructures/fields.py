"""Field data structures for interpolation results."""
from dataclasses import dataclass
from typing import Dict, Hashable

import numpy as np
import pandas as pd


@dataclass
class InterpolationResult:
    """Interpolated variables of one target at one temporal id.

    Parameters
    ----------
    target_tag : str
        Name of the interpolation target.
    temporal_id : hashable
        Temporal id the data belongs to.
    points : np.ndarray
        Target points, shape (number_of_points, dim).
    vars : dict of str to np.ndarray
        Interpolated values per variable, each of shape (number_of_points,).
    """
    target_tag: str
    temporal_id: Hashable
    points: np.ndarray
    vars: Dict[str, np.ndarray]

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to DataFrame for analysis and plotting.

        Returns
        -------
        pd.DataFrame
            One row per target point with columns x0, x1, ... followed by one
            column per variable.
        """
        data = {f"x{d}": self.points[:, d] for d in range(self.points.shape[1])}
        data.update(self.vars)
        df = pd.DataFrame(data)
        df.insert(0, "temporal_id", [self.temporal_id] * len(df))
        return df
