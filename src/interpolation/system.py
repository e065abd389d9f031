"""Assembly of targets, interpolators and elements on one runtime."""

from dataclasses import dataclass
from typing import Dict

from .interpolator import Interpolator
from .runtime import Runtime
from .target import InterpolationTarget

SETUP_SENDER = "setup"


@dataclass
class InterpolationSystem:
    """Runtime with its interpolation targets and interpolators.

    Attributes
    ----------
    runtime : Runtime
    targets : dict
        Target actor per tag.
    interpolators : dict
        Interpolator actor per name.
    element_to_interpolator : dict
        Name of the interpolator responsible for each element id.
    """

    runtime: Runtime
    targets: Dict
    interpolators: Dict
    element_to_interpolator: Dict

    def add_temporal_ids(self, tag, temporal_ids, sender="evolution"):
        """Queue `add_temporal_ids` on the target `tag`."""
        self.runtime.send(sender, tag, "add_temporal_ids", list(temporal_ids))

    def send_volume_data(self, temporal_id, element_id, vars):
        """Queue the volume data of an element on its interpolator; the element is the sender."""
        interpolator = self.element_to_interpolator[element_id]
        self.runtime.send(element_id, interpolator, "receive_volume_data", temporal_id, element_id, vars)

    def run(self, rng=None, max_steps=1_000_000):
        return self.runtime.run(rng=rng, max_steps=max_steps)


def make_interpolation_system(target_infos, elements, number_of_interpolators=1, runtime=None):
    """Register targets and interpolators and distribute the elements.

    Elements are assigned to interpolators round robin and registered before
    the function returns, so volume data can be sent right away.

    Parameters
    ----------
    target_infos : sequence of InterpolationTargetInfo
    elements : sequence of Element
    number_of_interpolators : int, optional
        Default is 1.
    runtime : Runtime, optional
        Runtime to register the actors with. A new one by default.
    """
    if number_of_interpolators < 1:
        raise ValueError(f"Need at least one interpolator, got {number_of_interpolators}")
    runtime = Runtime() if runtime is None else runtime

    interpolator_names = [f"interpolator-{i}" for i in range(number_of_interpolators)]
    interpolators = {
        name: runtime.register(name, Interpolator(target_infos)) for name in interpolator_names
    }
    targets = {
        info.tag: runtime.register(info.tag, InterpolationTarget(info, interpolator_names))
        for info in target_infos
    }

    element_to_interpolator = {}
    for i, element in enumerate(elements):
        name = interpolator_names[i % number_of_interpolators]
        element_to_interpolator[element.element_id] = name
        runtime.send(SETUP_SENDER, name, "register_element", element)
    while not runtime.is_queue_empty():
        runtime.step()

    return InterpolationSystem(runtime, targets, interpolators, element_to_interpolator)
