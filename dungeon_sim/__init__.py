"""Dungeon crowd simulation: agents re-planning A* paths on a generated wall grid."""

__version__ = "0.1.0"
