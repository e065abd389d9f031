"""
Spectral Convergence of Differentiation and Interpolation
==========================================================

This script measures how fast the cached differentiation and interpolation
matrices converge for a smooth test function, for every supported basis and
quadrature, and plots the error against the number of collocation points.
"""

# %%
# Problem Setup
# -------------
# Test function f(x) = exp(sin(pi x)) on the reference interval, with its
# exact derivative. Interpolation errors are measured at uniformly spaced points.

import numpy as np
import pandas as pd

from spectral import SUPPORTED_COMBINATIONS
from utils import convergence_table, get_project_root, plot_convergence

project_root = get_project_root()
data_dir = project_root / "data" / "SpectralConvergence"
fig_dir = project_root / "figures" / "SpectralConvergence"
data_dir.mkdir(parents=True, exist_ok=True)
fig_dir.mkdir(parents=True, exist_ok=True)


def f(x):
    return np.exp(np.sin(np.pi * x))


def df(x):
    return np.pi * np.cos(np.pi * x) * f(x)


targets = np.linspace(-1.0, 1.0, 101)

# %%
# Convergence Tables
# ------------------
# One table per basis and quadrature, sampled over the whole supported range.

tables = []
for basis, quadrature in SUPPORTED_COMBINATIONS:
    table = convergence_table(basis, quadrature, f, df, targets)
    tables.append(table)

    final = table[table["n"] == table["n"].max()].set_index("quantity")["error"]
    print(f"{basis.value}-{quadrature.value}:")
    print(f"  Differentiation error (n={table['n'].max()}): {final['differentiation']:.3e}")
    print(f"  Interpolation error   (n={table['n'].max()}): {final['interpolation']:.3e}")

    plot_convergence(
        table,
        output_path=fig_dir / f"convergence_{basis.value}_{quadrature.value}.pdf",
        title=f"{basis.value} {quadrature.value}",
    )

# %%
# Save Results
# ------------

df_all = pd.concat(tables, ignore_index=True)
output_file = data_dir / "convergence.csv"
df_all.to_csv(output_file, index=False)

print(f"\nResults saved to: {output_file}")
