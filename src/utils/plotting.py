"""Plots of convergence tables."""

import matplotlib.pyplot as plt
import seaborn as sns


def plot_convergence(df, output_path=None, title=None):
    """Plot spectral convergence (error versus number of points) using seaborn.

    Parameters
    ----------
    df : pd.DataFrame
        Output of `convergence_table` (columns n, quantity, error).
    output_path : str or Path, optional
        Path to save figure. If None, figure is not saved.
    title : str, optional
        Figure title.

    Returns
    -------
    seaborn.FacetGrid
    """
    # Exact results give zero errors, which a log axis cannot show
    data = df.assign(error=df["error"].clip(lower=1e-17))

    g = sns.relplot(
        data=data,
        x="n",
        y="error",
        hue="quantity",
        kind="line",
        marker="o",
        height=5,
        aspect=1.6,
        linewidth=2,
    )
    g.ax.set_yscale("log")
    g.ax.grid(True, alpha=0.3)
    g.ax.set_xlabel("Number of collocation points")
    g.ax.set_ylabel("Maximum error")
    if title:
        g.ax.set_title(title, fontweight="bold")

    if output_path:
        g.savefig(output_path, bbox_inches="tight", dpi=300)
        print(f"Convergence plot saved to: {output_path}")
    plt.close(g.figure)
    return g
