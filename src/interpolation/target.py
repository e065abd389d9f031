"""Interpolation target actor.

An interpolation target owns the queue of temporal ids at which it wants
data. It handles one temporal id at a time: it computes its points, sends
them to every interpolator, collects the interpolated values and, once every
point is filled, tells the interpolators to clean up and moves on to the next
temporal id in its queue.
"""

import logging
from collections import Counter, deque
from enum import Enum

import numpy as np

from datastructures.fields import InterpolationResult
from .runtime import Actor

logger = logging.getLogger(__name__)


class TemporalIdState(Enum):
    Pending = "Pending"
    AwaitingData = "AwaitingData"
    Completed = "Completed"


class InterpolationTarget(Actor):
    """Actor tracking the temporal ids and collected values of one target.

    Parameters
    ----------
    info : InterpolationTargetInfo
        Target configuration.
    interpolators : sequence of hashable
        Names of the interpolator actors the target talks to.
    """

    actions = ("add_temporal_ids", "compute_target_points", "receive_vars")

    def __init__(self, info, interpolators):
        super().__init__()
        self.info = info
        self.interpolators = tuple(interpolators)
        self.temporal_ids = deque()
        self.indices_of_filled_interp_points = set()
        self.completed_temporal_ids = set()
        self.results = {}
        self.point_computations = Counter()
        self._pending = set()
        self._awaiting = None
        self._points = None
        self._vars = None

    @property
    def tag(self):
        return self.info.tag

    @property
    def pending_temporal_ids(self):
        return list(self.temporal_ids)

    def state_of(self, temporal_id):
        """State of `temporal_id` for this target, or None if the target never saw it."""
        if temporal_id in self.completed_temporal_ids:
            return TemporalIdState.Completed
        if temporal_id == self._awaiting:
            return TemporalIdState.AwaitingData
        if temporal_id in self._pending:
            return TemporalIdState.Pending
        return None

    # ---------------------------------------------------------------------
    # Actions
    # ---------------------------------------------------------------------
    def add_temporal_ids(self, temporal_ids):
        """Append the temporal ids this target does not know yet.

        Known ids (pending or completed) are skipped. If the queue was empty,
        point computation is queued for the new front id.
        """
        queue_was_empty = not self.temporal_ids
        added = []
        for temporal_id in temporal_ids:
            if temporal_id in self._pending or temporal_id in self.completed_temporal_ids:
                continue
            self.temporal_ids.append(temporal_id)
            self._pending.add(temporal_id)
            added.append(temporal_id)

        if added:
            logger.debug("Target %r queued temporal ids %s", self.tag, added)
        if queue_was_empty and self.temporal_ids:
            self.send(self.name, "compute_target_points", self.temporal_ids[0])

    def compute_target_points(self, temporal_id):
        """Compute the target points and send them to every interpolator."""
        if not self.temporal_ids or self.temporal_ids[0] != temporal_id or self._awaiting is not None:
            logger.warning(
                "Target %r ignores point computation for %r, which is not the next temporal id",
                self.tag,
                temporal_id,
            )
            return

        points = np.asarray(self.info.target_points.points(), dtype=np.float64)
        self._points = points
        self._vars = {name: np.full(points.shape[0], np.nan) for name in self.info.vars_to_interpolate}
        self.indices_of_filled_interp_points.clear()
        self._awaiting = temporal_id
        self.point_computations[temporal_id] += 1

        for interpolator in self.interpolators:
            self.send(interpolator, "receive_points", self.tag, temporal_id, points)

    def receive_vars(self, temporal_id, vars, global_indices):
        """Store interpolated values for the given point indices.

        Values for a temporal id other than the one being collected, and
        values for indices that are already filled, are ignored.
        """
        if temporal_id != self._awaiting:
            logger.debug("Target %r ignores stale data for %r", self.tag, temporal_id)
            return

        for position, index in enumerate(np.asarray(global_indices, dtype=np.int64)):
            index = int(index)
            if index in self.indices_of_filled_interp_points:
                continue
            for name in self.info.vars_to_interpolate:
                self._vars[name][index] = vars[name][position]
            self.indices_of_filled_interp_points.add(index)

        if len(self.indices_of_filled_interp_points) == self._points.shape[0]:
            self._finish(temporal_id)

    def _finish(self, temporal_id):
        result = InterpolationResult(self.tag, temporal_id, self._points, self._vars)
        self.results[temporal_id] = result
        if self.info.post_interpolation_callback is not None:
            self.info.post_interpolation_callback(result)

        self.completed_temporal_ids.add(temporal_id)
        for interpolator in self.interpolators:
            self.send(interpolator, "clean_up_interpolator", self.tag, temporal_id)

        self.temporal_ids.popleft()
        self._pending.discard(temporal_id)
        self._awaiting = None
        self._points = None
        self._vars = None
        self.indices_of_filled_interp_points.clear()
        logger.debug("Target %r completed temporal id %r", self.tag, temporal_id)

        if self.temporal_ids:
            self.send(self.name, "compute_target_points", self.temporal_ids[0])
