"""Interpolator actor.

The interpolator buffers volume data sent by the elements it is responsible
for, receives target points from the interpolation targets and sends back the
values interpolated from every element containing some of those points.
Buffered volume data for a temporal id is purged only after every registered
target has cleaned up that temporal id.
"""

import logging
from dataclasses import dataclass, field

import numpy as np

from .irregular_interpolant import IrregularInterpolant
from .runtime import Actor

logger = logging.getLogger(__name__)


@dataclass
class PointInfo:
    """Points of one target at one temporal id and the progress interpolating them."""

    points: np.ndarray
    interpolation_is_done_for_these_elements: set = field(default_factory=set)
    claimed: np.ndarray = None

    def __post_init__(self):
        self.points = np.atleast_2d(np.asarray(self.points, dtype=np.float64))
        if self.claimed is None:
            self.claimed = np.zeros(self.points.shape[0], dtype=bool)


class InterpolatedVarsHolder:
    """Per-target bookkeeping of an interpolator."""

    def __init__(self, info, target_name=None):
        self.info = info
        self.target_name = info.tag if target_name is None else target_name
        self.infos = {}
        self.temporal_ids_when_data_has_been_interpolated = set()


class Interpolator(Actor):
    """Actor interpolating buffered volume data to the points of every target.

    Parameters
    ----------
    target_infos : sequence of InterpolationTargetInfo
        Every target that sends points to this interpolator. Volume data is
        kept until all of them have cleaned up a temporal id.
    target_names : dict, optional
        Actor name of each target tag. Defaults to the tag itself.
    """

    actions = ("register_element", "receive_volume_data", "receive_points", "clean_up_interpolator")

    def __init__(self, target_infos, target_names=None):
        super().__init__()
        target_names = target_names or {}
        self.elements = {}
        self.volume_vars_info = {}
        self.interpolated_vars_holders = {
            info.tag: InterpolatedVarsHolder(info, target_names.get(info.tag)) for info in target_infos
        }
        if len(self.interpolated_vars_holders) != len(target_infos):
            raise ValueError("Interpolation target tags must be unique")
        # Purged ids above the watermark; every id at or below it counts as purged
        self.purged_temporal_ids = set()
        self.purged_watermark = None

    def is_purged(self, temporal_id):
        """Whether the volume data of `temporal_id` was consumed by every target."""
        if self.purged_watermark is not None and temporal_id <= self.purged_watermark:
            return True
        return temporal_id in self.purged_temporal_ids

    def completed_temporal_ids(self, tag):
        """Temporal ids cleaned up by `tag` whose volume data is still buffered."""
        return set(self.interpolated_vars_holders[tag].temporal_ids_when_data_has_been_interpolated)

    # ---------------------------------------------------------------------
    # Actions
    # ---------------------------------------------------------------------
    def register_element(self, element):
        self.elements[element.element_id] = element

    def receive_volume_data(self, temporal_id, element_id, vars):
        """Buffer the volume data of an element and interpolate to waiting targets."""
        if element_id not in self.elements:
            raise KeyError(f"Interpolator {self.name!r} received data from unregistered element {element_id!r}")
        if self.is_purged(temporal_id):
            logger.warning(
                "Interpolator %r drops data of element %r for %r, already consumed by every target",
                self.name,
                element_id,
                temporal_id,
            )
            return

        num_points = self.elements[element_id].mesh.number_of_grid_points
        vars = {name: np.asarray(values, dtype=np.float64) for name, values in vars.items()}
        for name, values in vars.items():
            if values.shape[0] != num_points:
                raise ValueError(
                    f"Variable {name!r} of element {element_id!r} has {values.shape[0]} values, "
                    f"expected {num_points}"
                )
        missing = sorted(
            {name for holder in self.interpolated_vars_holders.values() for name in holder.info.vars_to_interpolate}
            - set(vars)
        )
        if missing:
            raise ValueError(f"Volume data of element {element_id!r} at {temporal_id!r} lacks variables {missing}")
        self.volume_vars_info.setdefault(temporal_id, {})[element_id] = vars

        for tag, holder in self.interpolated_vars_holders.items():
            if temporal_id in holder.infos:
                self._try_to_interpolate(tag, temporal_id)

    def receive_points(self, tag, temporal_id, points):
        """Store the points of a target and interpolate from the buffered elements."""
        holder = self.interpolated_vars_holders[tag]
        if self.is_purged(temporal_id):
            logger.warning("Interpolator %r ignores points of %r for purged %r", self.name, tag, temporal_id)
            return
        holder.infos[temporal_id] = PointInfo(points)
        self._try_to_interpolate(tag, temporal_id)

    def clean_up_interpolator(self, tag, temporal_id):
        """Record that `tag` is done with `temporal_id`.

        Once every registered target is done with it, the buffered volume data
        of `temporal_id` is removed. Until then this only updates the
        bookkeeping of `tag`.
        """
        holder = self.interpolated_vars_holders[tag]
        holder.temporal_ids_when_data_has_been_interpolated.add(temporal_id)
        holder.infos.pop(temporal_id, None)

        if all(
            temporal_id in h.temporal_ids_when_data_has_been_interpolated
            for h in self.interpolated_vars_holders.values()
        ):
            self.volume_vars_info.pop(temporal_id, None)
            for h in self.interpolated_vars_holders.values():
                h.temporal_ids_when_data_has_been_interpolated.discard(temporal_id)
            self.purged_temporal_ids.add(temporal_id)
            self._advance_purged_watermark()
            logger.debug("Interpolator %r purged volume data for %r", self.name, temporal_id)

    def _advance_purged_watermark(self):
        # Purged ids older than every id still buffered or requested collapse into the watermark
        live = set(self.volume_vars_info)
        for holder in self.interpolated_vars_holders.values():
            live.update(holder.infos)
            live.update(holder.temporal_ids_when_data_has_been_interpolated)
        oldest_live = min(live) if live else None
        folded = [t for t in self.purged_temporal_ids if oldest_live is None or t < oldest_live]
        if folded:
            newest = max(folded)
            if self.purged_watermark is None or newest > self.purged_watermark:
                self.purged_watermark = newest
            self.purged_temporal_ids.difference_update(folded)

    # ---------------------------------------------------------------------
    # Interpolation
    # ---------------------------------------------------------------------
    def _try_to_interpolate(self, tag, temporal_id):
        volume_vars = self.volume_vars_info.get(temporal_id)
        if not volume_vars:
            return
        holder = self.interpolated_vars_holders[tag]
        info = holder.infos[temporal_id]

        for element_id, vars in volume_vars.items():
            if element_id in info.interpolation_is_done_for_these_elements:
                continue

            element = self.elements[element_id]
            # A point on a shared face belongs to the first element that claims it
            indices = np.flatnonzero(element.contains(info.points) & ~info.claimed)
            if indices.size == 0:
                info.interpolation_is_done_for_these_elements.add(element_id)
                continue

            interpolant = IrregularInterpolant(element.mesh, element.to_logical(info.points[indices]))
            values = {name: interpolant.interpolate(vars[name]) for name in holder.info.vars_to_interpolate}
            info.interpolation_is_done_for_these_elements.add(element_id)
            info.claimed[indices] = True
            self.send(holder.target_name, "receive_vars", temporal_id, values, indices)
