"""
Constants used across the extractor modules.

Region sizes of the path node file format. None of these can be derived
from the file contents; they are fixed by the format.
"""

# Fixed-size record and region sizes (bytes)
HEADER_SIZE = 20
NODE_SIZE = 28
NAVIGATION_NODE_SIZE = 14
LINK_SIZE = 4
FILLER_SIZE = 768
NAVIGATION_LINK_SIZE = 2
LINK_LENGTH_SIZE = 1
PATH_INTERSECTION_FLAGS_SIZE = 1
UNKNOWN_DATA_SIZE = 192 * 2

# Positions are stored as signed 16-bit fixed point (1/8 unit)
COORDINATE_SCALE = 8.0

# Navigation node directions are signed 8-bit, scaled by 1/100
DIRECTION_SCALE = 100.0

# Default file name pattern for path node files
DEFAULT_NODE_FILE_PATTERN = "nodes*.dat"

# Number of vertices/edges written per export batch
DEFAULT_BATCH_SIZE = 1000


def expected_file_size(header) -> int:
    """
    Total byte length of a well-formed file for the given header counts.

    Args:
        header: Any object with number_of_nodes, number_of_navi_nodes and
                number_of_links attributes

    Returns:
        File size in bytes
    """
    links = header.number_of_links
    return (HEADER_SIZE
            + NODE_SIZE * header.number_of_nodes
            + NAVIGATION_NODE_SIZE * header.number_of_navi_nodes
            + LINK_SIZE * links
            + FILLER_SIZE
            + NAVIGATION_LINK_SIZE * links
            + LINK_LENGTH_SIZE * links
            + PATH_INTERSECTION_FLAGS_SIZE * links
            + UNKNOWN_DATA_SIZE)
