"""
Example driver: checks k-colorability of a fixed 4-cycle and counts its colorings.
"""

import argparse
import logging
import sys

from .config import load_config
from .encoder import ColoringEncoder
from .graph import Graph
from .utils.logging_utils import log_metrics_jsonl, setup_logging

logger = logging.getLogger(__name__)


def example_graph() -> Graph:
    """The 4-cycle 0-1-2-3-0."""
    graph = Graph(4)
    graph.add_edge(0, 1)
    graph.add_edge(1, 2)
    graph.add_edge(2, 3)
    graph.add_edge(0, 3)
    return graph


def run_example(num_colors: int = 5, metrics_path: str | None = None) -> dict:
    """
    Decide colorability of the example graph and count its colorings.

    Args:
        num_colors: Number of colors
        metrics_path: Optional JSONL file to append the summary to

    Returns:
        Summary dictionary
    """
    graph = example_graph()
    with ColoringEncoder(graph, num_colors) as encoder:
        colorable = encoder.is_colorable()
        num_colorings = len(encoder.enumerate_all_colorings()) if colorable else 0
        stats = encoder.solver.get_statistics()

    if colorable:
        logger.info(
            f"The graph is {num_colors}-colorable. "
            f"Additionally, there are {num_colorings} possible colorings."
        )
    else:
        logger.info(f"No {num_colors}-coloring is found!")

    summary = {
        "num_nodes": graph.num_nodes,
        "num_edges": graph.num_edges,
        "num_colors": num_colors,
        "colorable": colorable,
        "num_colorings": num_colorings,
        "solve_calls": stats.get("solve_calls"),
        "solve_time": stats.get("total_time"),
    }
    if metrics_path:
        log_metrics_jsonl(metrics_path, summary)
    return summary


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="k-coloring via SAT")
    parser.add_argument("-k", "--colors", type=int, default=5)
    parser.add_argument("--config", type=str, default=None)
    parser.add_argument("--metrics", type=str, default=None)
    args = parser.parse_args(argv)

    setup_logging(load_config(args.config))
    summary = run_example(args.colors, args.metrics)
    return 0 if summary["colorable"] else 1


if __name__ == "__main__":
    sys.exit(main())
