"""
Path Graph Export

Writes a PathGraph as batched JSON files so that a downstream importer can
load vertices and edges a batch at a time.

Output layout:
    <output_dir>/nodes_0001.json   [ {vertex}, ... ]   up to batch_size entries
    <output_dir>/links_0001.json   [ {edge}, ... ]
    <output_dir>/summary.json      counts
"""

import json
from pathlib import Path
from typing import Iterator, List, Sequence, TypeVar, Union

from ..constants import DEFAULT_BATCH_SIZE
from ..graph import PathGraph
from ..utils import log

T = TypeVar('T')


def iter_batches(items: Sequence[T], batch_size: int) -> Iterator[List[T]]:
    """
    Split items into consecutive batches.

    Args:
        items: Items to split
        batch_size: Maximum items per batch (must be positive)

    Yields:
        Lists of at most batch_size items
    """
    if batch_size <= 0:
        raise ValueError(f"Batch size must be positive, got {batch_size}")

    for start in range(0, len(items), batch_size):
        yield list(items[start:start + batch_size])


def batch_count(item_count: int, batch_size: int) -> int:
    """Number of batches needed for item_count items."""
    return (item_count + batch_size - 1) // batch_size


def _write_batches(records: Sequence[dict], output_dir: Path, prefix: str, label: str,
                   batch_size: int) -> List[Path]:
    written = []
    total = batch_count(len(records), batch_size)

    for index, batch in enumerate(iter_batches(records, batch_size), 1):
        log(f"Writing {label} batch {index} of {total}")
        path = output_dir / f"{prefix}_{index:04d}.json"
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(batch, f, indent=2)
        written.append(path)

    return written


def export_graph(graph: PathGraph, output_dir: Union[str, Path],
                 batch_size: int = DEFAULT_BATCH_SIZE) -> List[Path]:
    """
    Write graph vertices and edges as batched JSON.

    Args:
        graph: Graph to export
        output_dir: Output directory (created if missing)
        batch_size: Records per file

    Returns:
        Paths of all files written, summary last
    """
    if batch_size <= 0:
        raise ValueError(f"Batch size must be positive, got {batch_size}")

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = _write_batches([v.to_dict() for v in graph.vertices], output_dir, "nodes", "node", batch_size)
    written += _write_batches([e.to_dict() for e in graph.edges], output_dir, "links", "link", batch_size)

    summary_path = output_dir / "summary.json"
    with open(summary_path, 'w', encoding='utf-8') as f:
        json.dump({
            "vertex_count": graph.vertex_count,
            "edge_count": graph.edge_count,
            "dangling_edges": graph.dangling_edges,
            "skipped_links": graph.skipped_links,
            "batch_size": batch_size,
        }, f, indent=2)
    written.append(summary_path)

    log(f"Exported {graph.vertex_count} nodes and {graph.edge_count} links to {output_dir}")
    return written
