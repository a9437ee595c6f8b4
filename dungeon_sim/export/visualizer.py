"""Visualization and export for the dungeon crowd simulation."""

import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
from matplotlib.collections import PatchCollection
from matplotlib.patches import Circle, Rectangle
from pathlib import Path
from typing import List, Sequence, Tuple, TYPE_CHECKING
from PIL import Image
import io

if TYPE_CHECKING:
    from ..model.render import Drawable


class Visualizer:
    """
    Draws render feeds with matplotlib.

    The canvas is `grid_size * cell_scale` pixels square with y growing
    downward, matching the render feed's pixel coordinates.

    Supports:
    - Single PNG snapshots
    - Animated GIF compilation
    """

    def __init__(self, grid_size: int, cell_scale: int,
                 background: Tuple[float, float, float]):
        self.extent = grid_size * cell_scale
        self.background = background
        self.frames: List[Image.Image] = []

    def _create_figure(self, feed: Sequence["Drawable"], title: str = "") -> plt.Figure:
        """Create matplotlib figure for a render feed."""
        fig, ax = plt.subplots(figsize=(8, 8))
        ax.set_facecolor(self.background)
        fig.patch.set_facecolor(self.background)

        squares, square_colors = [], []
        circles, circle_colors = [], []
        for d in feed:
            cx, cy = d.center
            half = d.size / 2
            if d.shape == "square":
                squares.append(Rectangle((cx - half, cy - half), d.size, d.size))
                square_colors.append(d.color)
            else:
                circles.append(Circle((cx, cy), half))
                circle_colors.append(d.color)

        # Tiles first, agents on top
        if squares:
            ax.add_collection(PatchCollection(
                squares, facecolors=square_colors, edgecolors='none'))
        if circles:
            ax.add_collection(PatchCollection(
                circles, facecolors=circle_colors, edgecolors='none'))

        ax.set_xlim(0, self.extent)
        ax.set_ylim(self.extent, 0)
        ax.set_aspect('equal')
        ax.set_xticks([])
        ax.set_yticks([])
        if title:
            ax.set_title(title)

        plt.tight_layout()
        return fig

    def buffer_frame(self, feed: Sequence["Drawable"], title: str = "") -> None:
        """Store frame for GIF generation."""
        fig = self._create_figure(feed, title)

        # Convert to PIL Image
        buf = io.BytesIO()
        fig.savefig(buf, format='png', dpi=80)
        buf.seek(0)
        img = Image.open(buf).copy()
        self.frames.append(img)
        buf.close()
        plt.close(fig)

    def save_snapshot(self, feed: Sequence["Drawable"], output_path: Path,
                      title: str = "") -> None:
        """Save single PNG image of a render feed."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig = self._create_figure(feed, title)
        fig.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close(fig)

    def generate_gif(self, output_path: Path, fps: int = 10) -> None:
        """Compile buffered frames into animated GIF."""
        if not self.frames:
            return

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        duration = int(1000 / fps)  # milliseconds per frame

        self.frames[0].save(
            output_path,
            save_all=True,
            append_images=self.frames[1:],
            duration=duration,
            loop=0
        )
