"""
Extraction Package

Directory scanning and per-file isolated decoding.
"""

from .batch import DecodeResult, find_node_files, decode_files, decode_directory, total_node_count
