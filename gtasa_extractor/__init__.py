"""
GTA San Andreas path node extractor.

Decodes nodes*.dat path files into typed records and joins them into a
directed path graph.

Usage:
    from gtasa_extractor import parse_path_file, PathGraph

    node_file = parse_path_file("paths/nodes0.dat")
    graph = PathGraph.from_node_files([node_file])
"""

from .parsers import (
    NodeType,
    PathHeader,
    PathNode,
    NavigationNode,
    Link,
    NavigationLink,
    LinkLength,
    PathIntersectionFlags,
    NodeFile,
    PathFileError,
    TruncatedInputError,
    UnexpectedFileSizeError,
    parse_node_file,
    parse_path_file,
)
from .graph import PathGraph

__version__ = "0.1.0"
