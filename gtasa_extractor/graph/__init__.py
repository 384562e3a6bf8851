"""
Graph Package

Directed path graph assembled from decoded path node files.
"""

from .path_graph import PathGraph, PathVertex, PathEdge
