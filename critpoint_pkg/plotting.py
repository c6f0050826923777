"""Render a sampled surface and its critical points to an image file."""

from __future__ import annotations

import tempfile

import matplotlib

matplotlib.use("Agg")  # Use non-GUI backend (no Tkinter required)
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

from .logging_config import get_logger  # noqa: E402
from .types import Kind, PlotGenerationError, SampledSurface  # noqa: E402

logger = get_logger("plotting")

KIND_COLORS = {
    Kind.LOCAL_MAX: "#ff4136",
    Kind.LOCAL_MIN: "#2ecc71",
    Kind.SADDLE: "#1e90ff",
    Kind.INCONCLUSIVE: "#ffd700",
}


def render_surface(
    surface: SampledSurface,
    title: str = "",
    output_path: str | None = None,
    dpi: int = 150,
) -> str:
    """Draw the surface with critical points overlaid and save it as PNG.

    Missing cells are NaN in ``surface.z`` and show as holes.

    Args:
        surface: Sampled grid and overlay points
        title: Figure title (usually the function text)
        output_path: Where to save; a temporary file is used if None
        dpi: Output resolution

    Returns:
        Path of the saved image

    Raises:
        PlotGenerationError: if drawing or saving fails
    """
    if output_path is None:
        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as temp_file:
            output_path = temp_file.name

    # z[i][j] pairs with xs[i], ys[j]; meshgrid with ij indexing keeps that layout
    grid_x, grid_y = np.meshgrid(surface.xs, surface.ys, indexing="ij")

    fig = plt.figure(figsize=(9, 7))
    try:
        ax = fig.add_subplot(projection="3d")
        if not surface.missing.all():
            ax.plot_surface(
                grid_x, grid_y, surface.z, cmap="viridis", alpha=0.9, linewidth=0
            )
        for kind, color in KIND_COLORS.items():
            points = [p for p in surface.overlay_points if p.kind == kind]
            if not points:
                continue
            ax.scatter(
                [p.x for p in points],
                [p.y for p in points],
                [p.z for p in points],
                color=color,
                marker="D",
                s=60,
                edgecolors="white",
                label=kind.value,
                depthshade=False,
            )
        ax.set_xlabel("x", fontsize=12, fontweight="bold")
        ax.set_ylabel("y", fontsize=12, fontweight="bold")
        ax.set_zlabel("f(x, y)", fontsize=12, fontweight="bold")
        if title:
            ax.set_title(f"f(x, y) = {title}", fontsize=14, fontweight="bold")
        if surface.overlay_points:
            ax.legend(loc="upper left", fontsize=9)
        fig.savefig(output_path, dpi=dpi, bbox_inches="tight")
    except (ValueError, TypeError, OSError) as e:
        logger.warning("Rendering failed: %s", e)
        raise PlotGenerationError(f"Failed to render plot: {e}") from e
    finally:
        plt.close(fig)

    logger.info("Plot saved to %s", output_path)
    return output_path
