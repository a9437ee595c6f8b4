"""Export package for the dungeon crowd simulation."""

from .csv_writer import CSVWriter
from .visualizer import Visualizer
from .reporter import Reporter, layout_stats

__all__ = ['CSVWriter', 'Visualizer', 'Reporter', 'layout_stats']
