"""
Interpolation to a Wedge Section of a Torus
============================================

This script interpolates volume data from a block of cube elements to a
WedgeSectionTorus target at several temporal ids, delivering the messages of
the interpolation actors in a random order.
"""

# %%
# Problem Setup
# -------------
# Eight elements with 8 Legendre-Gauss-Lobatto points per dimension cover
# [-2, 2]^3. The interpolated field is psi = exp(-r^2) cos(t x).

from fractions import Fraction

import numpy as np
import pandas as pd

from datastructures import Element, InterpolationTargetInfo, Mesh
from interpolation import LineSegment, WedgeSectionTorus, make_interpolation_system
from utils import get_project_root

project_root = get_project_root()
data_dir = project_root / "data" / "Interpolation"
data_dir.mkdir(parents=True, exist_ok=True)

mesh = Mesh((8, 8, 8))
elements = [
    Element(f"cube-{i}", tuple(lower), tuple(lower + 2.0), mesh)
    for i, lower in enumerate(
        np.array(np.meshgrid([-2.0, 0.0], [-2.0, 0.0], [-2.0, 0.0], indexing="ij")).reshape(3, -1).T
    )
]


def psi(points, t):
    r2 = np.sum(points**2, axis=1)
    return np.exp(-r2) * np.cos(float(t) * points[:, 0])


torus = WedgeSectionTorus(
    min_radius=0.8,
    max_radius=1.6,
    min_theta=0.25 * np.pi,
    max_theta=0.75 * np.pi,
    number_of_radial_points=6,
    number_of_theta_points=5,
    number_of_phi_points=8,
)
line = LineSegment((-1.9, -1.9, -1.9), (1.9, 1.9, 1.9), 21)

target_infos = [
    InterpolationTargetInfo("Torus", torus, ("psi",)),
    InterpolationTargetInfo("Diagonal", line, ("psi",)),
]
temporal_ids = [Fraction(k, 4) for k in range(5)]

print(f"Elements: {len(elements)}, mesh extents: {mesh.extents}")
print(f"Torus points: {torus.points().shape[0]}, line points: {line.points().shape[0]}")

# %%
# Run the Interpolation
# ---------------------
# Temporal ids arrive in two overlapping batches; every element sends its
# volume data at every temporal id.

system = make_interpolation_system(target_infos, elements, number_of_interpolators=3)
for info in target_infos:
    system.add_temporal_ids(info.tag, temporal_ids[:3])
    system.add_temporal_ids(info.tag, temporal_ids[2:])
for t in temporal_ids:
    for element in elements:
        system.send_volume_data(t, element.element_id, {"psi": psi(element.inertial_coordinates(), t)})

num_messages = system.run(rng=np.random.default_rng(42))
print(f"Delivered {num_messages} messages")

# %%
# Errors and Results
# ------------------

frames = []
for info in target_infos:
    target = system.targets[info.tag]
    for t in temporal_ids:
        result = target.results[t]
        error = np.max(np.abs(result.vars["psi"] - psi(result.points, t)))
        print(f"  {info.tag:>8s} t={str(t):>4s}: max error = {error:.3e}")
        df = result.to_dataframe()
        df.insert(0, "target", info.tag)
        frames.append(df)

for name, interpolator in system.interpolators.items():
    print(f"  {name}: buffered temporal ids = {sorted(interpolator.volume_vars_info)}")

output_file = data_dir / "interpolation_results.csv"
pd.concat(frames, ignore_index=True).to_csv(output_file, index=False)

print(f"\nResults saved to: {output_file}")
