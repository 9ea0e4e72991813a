import logging
from typing import Optional, Sequence

import matplotlib.pyplot as plt
from shapely.geometry import Polygon

logger = logging.getLogger(__name__)


def plot_parts(parts: Sequence[Polygon], original: Optional[Polygon] = None,
               filename: Optional[str] = None, title: str = "Equal-area split", ax=None):
    """
    Draws the parts filled in distinct colors, with the original outline on top.

    Args:
        parts: Split parts.
        original: Polygon before splitting (outline only).
        filename: When given, the figure is saved there and closed.
        title: Axes title.
        ax: Existing matplotlib axes to draw on.

    Returns:
        The matplotlib Axes.
    """
    own_figure = ax is None
    if own_figure:
        fig, ax = plt.subplots(figsize=(10, 10))
    else:
        fig = ax.figure

    colors = plt.cm.tab20.colors
    for i, part in enumerate(parts):
        x, y = part.exterior.xy
        ax.fill(x, y, color=colors[i % len(colors)], alpha=0.5)
        ax.plot(x, y, color='black', linewidth=0.8)
        c = part.representative_point()
        ax.annotate(str(i + 1), (c.x, c.y), ha='center', va='center', fontsize=8)

    if original is not None:
        x_o, y_o = original.exterior.xy
        ax.plot(x_o, y_o, color='black', linewidth=2, label='Original')
        ax.legend()

    ax.set_title(title)
    ax.set_aspect('equal')
    ax.grid(True)

    if filename:
        fig.savefig(filename)
        logger.info("Plot saved to: %s", filename)
        if own_figure:
            plt.close(fig)
    return ax
