"""
Path File Parsers

- base: ByteCursor and the decode error types
- node_file: records and readers for nodes*.dat path files

Usage:
    from gtasa_extractor.parsers import parse_path_file

    node_file = parse_path_file("paths/nodes0.dat")
    if node_file is not None:
        for node in node_file.nodes:
            print(node.node_type, node.key, node.position)
"""

from .base import (
    ByteCursor,
    PathFileError,
    TruncatedInputError,
    UnexpectedFileSizeError,
)

from .node_file import (
    NodeType,
    PathHeader,
    PathNode,
    NavigationNode,
    Link,
    NavigationLink,
    LinkLength,
    PathIntersectionFlags,
    NodeFile,
    read_path_header,
    read_path_nodes,
    read_navigation_nodes,
    read_path_links,
    read_navigation_links,
    read_link_lengths,
    read_path_intersection_flags,
    parse_node_file,
    parse_path_file,
)

__all__ = [
    # Base
    'ByteCursor',
    'PathFileError',
    'TruncatedInputError',
    'UnexpectedFileSizeError',
    # Records
    'NodeType',
    'PathHeader',
    'PathNode',
    'NavigationNode',
    'Link',
    'NavigationLink',
    'LinkLength',
    'PathIntersectionFlags',
    'NodeFile',
    # Readers
    'read_path_header',
    'read_path_nodes',
    'read_navigation_nodes',
    'read_path_links',
    'read_navigation_links',
    'read_link_lengths',
    'read_path_intersection_flags',
    'parse_node_file',
    'parse_path_file',
]
