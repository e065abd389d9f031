"""
test_interpolation_system.py: End-to-end interpolation under message interleavings

Tests:
    - runtime channels, delivery and errors
    - in-order runs with one and several interpolators, 1D and 3D elements
    - volume data kept while a target still waits on a temporal id
    - randomized delivery order gives the same final state as in-order delivery
"""

import numpy as np
import pytest

from datastructures import Element, InterpolationTargetInfo, Mesh
from interpolation import (
    Actor,
    Runtime,
    SpecifiedPoints,
    TemporalIdState,
    WedgeSectionTorus,
    make_interpolation_system,
)


class Recorder(Actor):
    actions = ("record",)

    def __init__(self):
        super().__init__()
        self.received = []

    def record(self, value):
        self.received.append(value)


class TestRuntime:

    def test_fifo_per_channel(self):
        runtime = Runtime()
        recorder = runtime.register("r", Recorder())
        for i in range(5):
            runtime.send("s", "r", "record", i)
        assert runtime.run() == 5
        assert recorder.received == list(range(5))
        assert runtime.delivered_count == 5

    def test_random_order_keeps_channel_order(self):
        runtime = Runtime()
        recorder = runtime.register("r", Recorder())
        for i in range(10):
            runtime.send("s1", "r", "record", ("s1", i))
            runtime.send("s2", "r", "record", ("s2", i))
        runtime.run(rng=np.random.default_rng(3))
        for sender in ("s1", "s2"):
            assert [i for s, i in recorder.received if s == sender] == list(range(10))

    def test_duplicate_name(self):
        runtime = Runtime()
        runtime.register("r", Recorder())
        with pytest.raises(ValueError):
            runtime.register("r", Recorder())

    def test_unknown_receiver(self):
        with pytest.raises(KeyError):
            Runtime().send("s", "nobody", "record", 1)

    def test_nothing_queued(self):
        runtime = Runtime()
        runtime.register("r", Recorder())
        assert runtime.step() is False
        with pytest.raises(LookupError):
            runtime.invoke_queued_action("r")

    def test_max_steps(self):
        class Echo(Actor):
            actions = ("ping",)

            def ping(self):
                self.send(self.name, "ping")

        runtime = Runtime()
        runtime.register("echo", Echo())
        runtime.send("s", "echo", "ping")
        with pytest.raises(RuntimeError):
            runtime.run(max_steps=50)

    def test_unregistered_actor_cannot_send(self):
        with pytest.raises(RuntimeError):
            Recorder().send("r", "record", 1)


class TestInOrderRun:

    @pytest.mark.parametrize("number_of_interpolators", [1, 2])
    def test_all_targets_complete(
        self, make_line_system, send_cubic_data, cubic_field, temporal_ids, number_of_interpolators
    ):
        system = make_line_system(number_of_interpolators=number_of_interpolators)
        for tag in ("A", "B"):
            system.add_temporal_ids(tag, temporal_ids)
        send_cubic_data(system, temporal_ids)
        system.run()

        for target in system.targets.values():
            assert target.completed_temporal_ids == set(temporal_ids)
            for temporal_id, result in target.results.items():
                x = result.points[:, 0]
                np.testing.assert_allclose(result.vars["u"], cubic_field(x), atol=1e-12)
        for interpolator in system.interpolators.values():
            assert interpolator.volume_vars_info == {}
            assert all(interpolator.is_purged(t) for t in temporal_ids)
            assert interpolator.purged_watermark == temporal_ids[-1]
            assert interpolator.purged_temporal_ids == set()

    def test_data_before_temporal_ids(self, make_line_system, send_cubic_data, temporal_ids):
        system = make_line_system()
        send_cubic_data(system, temporal_ids[:2])
        system.run()
        assert set(system.interpolators["interpolator-0"].volume_vars_info) == set(temporal_ids[:2])

        for tag in ("A", "B"):
            system.add_temporal_ids(tag, temporal_ids[:2])
        system.run()
        assert system.interpolators["interpolator-0"].volume_vars_info == {}

    def test_waiting_target_keeps_volume_data(self, make_line_system, send_cubic_data, temporal_ids):
        system = make_line_system()
        system.add_temporal_ids("A", temporal_ids[:2])
        send_cubic_data(system, temporal_ids[:2])
        system.run()

        interpolator = system.interpolators["interpolator-0"]
        assert system.targets["A"].completed_temporal_ids == set(temporal_ids[:2])
        assert set(interpolator.volume_vars_info) == set(temporal_ids[:2])
        assert interpolator.completed_temporal_ids("A") == set(temporal_ids[:2])
        assert interpolator.completed_temporal_ids("B") == set()

    def test_point_outside_elements_is_never_filled(self, line_elements, send_cubic_data, temporal_ids):
        info = InterpolationTargetInfo("A", SpecifiedPoints([[0.5], [3.0]]))
        system = make_interpolation_system([info], line_elements)
        system.add_temporal_ids("A", temporal_ids[:1])
        send_cubic_data(system, temporal_ids[:1])
        system.run()

        target = system.targets["A"]
        assert target.state_of(temporal_ids[0]) == TemporalIdState.AwaitingData
        assert target.indices_of_filled_interp_points == {0}

    def test_result_dataframe(self, make_line_system, send_cubic_data, temporal_ids):
        system = make_line_system(tags=("A",), number_of_points=4)
        system.add_temporal_ids("A", temporal_ids[:1])
        send_cubic_data(system, temporal_ids[:1])
        system.run()

        df = system.targets["A"].results[temporal_ids[0]].to_dataframe()
        assert list(df.columns) == ["temporal_id", "x0", "u"]
        assert len(df) == 4

    def test_duplicate_tags_rejected(self, line_elements):
        infos = [InterpolationTargetInfo("A", SpecifiedPoints([[0.5]]))] * 2
        with pytest.raises(ValueError):
            make_interpolation_system(infos, line_elements)

    def test_needs_an_interpolator(self, line_elements):
        with pytest.raises(ValueError):
            make_interpolation_system([], line_elements, number_of_interpolators=0)


def field_3d(points):
    x, y, z = points.T
    return x * y - 0.5 * z**3 + y**2 * z + 2.0


@pytest.fixture
def cube_elements():
    """Eight elements of extents (4, 4, 4) covering [-2, 2]^3."""
    mesh = Mesh((4, 4, 4))
    elements = []
    for i, lower in enumerate(np.array(np.meshgrid([-2.0, 0.0], [-2.0, 0.0], [-2.0, 0.0])).reshape(3, -1).T):
        elements.append(Element(f"cube-{i}", tuple(lower), tuple(lower + 2.0), mesh))
    return elements


class TestTorusTarget:

    def test_torus_values(self, cube_elements, temporal_ids):
        torus = WedgeSectionTorus(0.5, 1.8, 0.3, 2.5, 4, 5, 6)
        infos = [InterpolationTargetInfo("Torus", torus, ("psi", "phi"))]
        system = make_interpolation_system(infos, cube_elements, number_of_interpolators=3)

        system.add_temporal_ids("Torus", temporal_ids[:2])
        for temporal_id in temporal_ids[:2]:
            for element in cube_elements:
                coords = element.inertial_coordinates()
                vars = {"psi": field_3d(coords), "phi": float(temporal_id) * coords[:, 0]}
                system.send_volume_data(temporal_id, element.element_id, vars)
        system.run()

        points = torus.points()
        for temporal_id in temporal_ids[:2]:
            result = system.targets["Torus"].results[temporal_id]
            np.testing.assert_allclose(result.vars["psi"], field_3d(points), atol=1e-11)
            np.testing.assert_allclose(result.vars["phi"], float(temporal_id) * points[:, 0], atol=1e-12)


def run_scenario(make_line_system, send_cubic_data, temporal_ids, rng):
    system = make_line_system(number_of_interpolators=2)
    # Ids arrive in two overlapping batches per target
    for tag in ("A", "B"):
        system.add_temporal_ids(tag, temporal_ids[:2])
        system.add_temporal_ids(tag, temporal_ids[1:])
    send_cubic_data(system, temporal_ids)
    system.run(rng=rng)
    return system


def assert_same_final_state(system, reference):
    for tag, target in system.targets.items():
        expected = reference.targets[tag]
        assert target.completed_temporal_ids == expected.completed_temporal_ids
        assert target.point_computations == expected.point_computations
        assert not target.temporal_ids
        for temporal_id, result in expected.results.items():
            np.testing.assert_allclose(target.results[temporal_id].vars["u"], result.vars["u"], atol=1e-12)
    for name, interpolator in system.interpolators.items():
        assert interpolator.volume_vars_info == {}
        assert interpolator.purged_temporal_ids == reference.interpolators[name].purged_temporal_ids
        assert interpolator.purged_watermark == reference.interpolators[name].purged_watermark


class TestInterleavings:

    @pytest.mark.parametrize("seed", range(12))
    def test_random_delivery_matches_in_order(
        self, make_line_system, send_cubic_data, temporal_ids, rng_factory, seed
    ):
        reference = run_scenario(make_line_system, send_cubic_data, temporal_ids, None)
        system = run_scenario(make_line_system, send_cubic_data, temporal_ids, rng_factory(seed))
        assert_same_final_state(system, reference)
        assert all(count == 1 for count in system.targets["A"].point_computations.values())

    @pytest.mark.slow
    @pytest.mark.parametrize("seed", range(12, 212))
    def test_random_delivery_many_seeds(
        self, make_line_system, send_cubic_data, temporal_ids, rng_factory, seed
    ):
        reference = run_scenario(make_line_system, send_cubic_data, temporal_ids, None)
        system = run_scenario(make_line_system, send_cubic_data, temporal_ids, rng_factory(seed))
        assert_same_final_state(system, reference)
