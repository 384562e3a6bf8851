#!/usr/bin/env python3
"""
Extract Paths

Decodes every path node file in a directory and exports the joined
path graph as batched JSON.

Pipeline:
1. Load settings (paths.ini, overridden by command line flags)
2. Decode each nodes*.dat file independently
3. Join all decoded files into one path graph
4. Write node and link batches

Usage:
    python -m gtasa_extractor.extract_paths --path ./paths --output ./export
"""

import sys
import argparse
import time
from dataclasses import replace
from pathlib import Path
from typing import List

from .config import ExtractorConfig
from .extraction import DecodeResult, decode_directory, total_node_count
from .graph import PathGraph
from .serialization import export_graph
from .utils import log, logError, init_logging, print_summary


def run_extraction(config: ExtractorConfig, export: bool = True) -> List[DecodeResult]:
    """
    Run the decode / graph / export pipeline.

    Args:
        config: Extraction settings
        export: Write JSON batches when True

    Returns:
        Per-file decode results
    """
    log("=" * 70)
    log("PATH EXTRACTOR")
    log("=" * 70)
    log(f"Paths directory: {Path(config.paths_dir).absolute()}")
    if config.legacy_bitfields:
        log("Using legacy bitfield extraction")
    log()

    start_time = time.time()

    results = decode_directory(config.paths_dir, config.pattern, legacy_bitfields=config.legacy_bitfields)
    node_files = [r.node_file for r in results if r.ok]
    failed = sum(1 for r in results if r.failed)

    log()
    log(f"Decoded {len(node_files)} of {len(results)} file(s), {failed} failed")
    log(f"Nodes count {total_node_count(results)}")

    graph = PathGraph.from_node_files(node_files)
    log(f"Links count {graph.edge_count} ({graph.dangling_edges} to unloaded nodes)")

    if export:
        log()
        export_graph(graph, config.output_dir, config.batch_size)

    log(f"\nFinished in {time.time() - start_time:.2f}s")
    return results


def main():
    parser = argparse.ArgumentParser(
        description='Decode path node files and export the path graph',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example:
    python -m gtasa_extractor.extract_paths --path ./paths --output ./export

    # Settings from an INI file, flags still win:
    python -m gtasa_extractor.extract_paths --config paths.ini --batch-size 500

    # Historical sub-byte field values:
    python -m gtasa_extractor.extract_paths --legacy-bitfields
        """
    )

    parser.add_argument('--config', default=None,
                        help='Path to extractor INI file')
    parser.add_argument('-p', '--path', default=None,
                        help='Directory containing path node files (default ./paths)')
    parser.add_argument('--pattern', default=None,
                        help='File name pattern (default nodes*.dat)')
    parser.add_argument('-o', '--output', default=None,
                        help='Output directory for JSON batches (default ./export)')
    parser.add_argument('--batch-size', type=int, default=None,
                        help='Records per output file (default 1000)')
    parser.add_argument('--legacy-bitfields', action='store_true',
                        help='Reproduce historical traffic level, lane and navigation link values')
    parser.add_argument('--no-export', action='store_true',
                        help='Decode only, do not write output')
    parser.add_argument('--log', default=None,
                        help='Write a log file')
    args = parser.parse_args()

    try:
        config = ExtractorConfig.from_ini(args.config) if args.config else ExtractorConfig()

        overrides = {}
        if args.path:
            overrides['paths_dir'] = args.path
        if args.pattern:
            overrides['pattern'] = args.pattern
        if args.output:
            overrides['output_dir'] = args.output
        if args.batch_size is not None:
            overrides['batch_size'] = args.batch_size
        if args.legacy_bitfields:
            overrides['legacy_bitfields'] = True
        if args.log:
            overrides['log_file'] = args.log
        config = replace(config, **overrides)

        init_logging(Path(config.log_file) if config.log_file else None)

        results = run_extraction(config, export=not args.no_export)
        print_summary()

        if any(r.failed for r in results):
            sys.exit(1)

    except Exception as e:
        logError(f"{e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()
