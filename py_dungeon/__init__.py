"""
py-dungeon: Delaunay triangulation and corridor generation for procedural dungeons.
"""

__version__ = "0.1.0"
