"""
Serialization Package

Batched JSON export of the path graph.
"""

from .graph_export import export_graph, iter_batches, batch_count
