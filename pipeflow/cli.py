"""Command-line interface for pipeflow."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from pipeflow.algorithms.max_flow import calc_max_flow
from pipeflow.algorithms.types import FlowResult
from pipeflow.errors import PipeflowError
from pipeflow.io import load_network, result_to_json, save_network
from pipeflow.logging import get_logger, set_global_log_level
from pipeflow.model.network import CapacitatedGraph

logger = get_logger(__name__)


def _format_table(
    headers: List[str],
    rows: List[List[Any]],
    min_width: int = 6,
    max_col_width: Optional[int] = None,
) -> str:
    """Format rows as a plain ASCII table, or "" when there are no rows."""
    if not rows:
        return ""

    def clip(val: Any) -> str:
        s = str(val)
        if max_col_width is not None and len(s) > max_col_width:
            return s[: max_col_width - 3] + "..."
        return s

    table = [[clip(h) for h in headers]] + [[clip(c) for c in row] for row in rows]
    widths = [
        max(min_width, max(len(row[i]) for row in table)) for i in range(len(headers))
    ]

    def format_row(cells: List[str]) -> str:
        return "   " + " | ".join(f"{c:<{widths[i]}}" for i, c in enumerate(cells))

    lines = [format_row(table[0])]
    lines.append("   " + "-+-".join("-" * w for w in widths))
    lines.extend(format_row(row) for row in table[1:])
    return "\n".join(lines)


def _print_result(result: FlowResult) -> None:
    graph = result.final_graph
    print(f"Max flow {result.source} -> {result.sink}: {result.max_flow}")

    print(f"\nAugmenting paths ({len(result.paths)}):")
    if result.paths:
        print(
            _format_table(
                ["#", "Path", "Bottleneck"],
                [
                    [i, " -> ".join(p.path), p.bottleneck]
                    for i, p in enumerate(result.paths, start=1)
                ],
                min_width=1,
            )
        )
    else:
        print("   none")

    print(f"\nArcs ({len(graph.arcs)}):")
    table = _format_table(
        ["From", "To", "Flow", "Capacity"],
        [[a.source, a.target, a.flow, a.capacity] for a in graph.arcs.values()],
    )
    print(table or "   none")

    saturated = graph.saturated_arcs()
    print(f"\nSaturated arcs: {len(saturated)} of {len(graph.arcs)}")
    if result.min_cut:
        cut = ", ".join(
            f"{graph.arcs[a].source}->{graph.arcs[a].target}" for a in result.min_cut
        )
        print(f"Min cut: {cut} (capacity {result.min_cut_capacity})")


def _inspect_network(path: Path) -> None:
    graph, source, sink = load_network(path)
    print(f"Network: {path}")
    print(f"   Nodes: {len(graph.nodes)}   Arcs: {len(graph.arcs)}")
    print(f"   Source: {source or '-'}   Sink: {sink or '-'}")
    _print_graph_tables(graph)


def _print_graph_tables(graph: CapacitatedGraph) -> None:
    if graph.nodes:
        print("\nNodes:")
        print(
            _format_table(
                ["Id", "Role", "Out", "In"],
                [
                    [
                        n.id,
                        n.role.value,
                        sum(1 for a in graph.arcs.values() if a.source == n.id),
                        sum(1 for a in graph.arcs.values() if a.target == n.id),
                    ]
                    for n in graph.nodes.values()
                ],
                max_col_width=30,
            )
        )
    if graph.arcs:
        print("\nArcs:")
        print(
            _format_table(
                ["From", "To", "Capacity"],
                [[a.source, a.target, a.capacity] for a in graph.arcs.values()],
                max_col_width=30,
            )
        )
    pairs = graph.antiparallel_pairs()
    if pairs:
        listed = ", ".join(f"{u}<->{v}" for u, v in pairs)
        print(f"\nAnti-parallel arc pairs: {listed}")


def _run_network(
    path: Path,
    source: Optional[str],
    sink: Optional[str],
    strict: Optional[bool],
    max_iterations: Optional[int],
    as_json: bool,
    output: Optional[Path],
) -> None:
    graph, doc_source, doc_sink = load_network(path)
    source = source or doc_source
    sink = sink or doc_sink
    if not source or not sink:
        raise PipeflowError(
            "Source and sink must be set in the document or with --source/--sink"
        )

    logger.info("Computing max flow %s -> %s on %s", source, sink, path)
    result = calc_max_flow(
        graph, source, sink, strict=strict, max_iterations=max_iterations
    )
    logger.info(
        "Max flow %d found with %d augmenting path(s)",
        result.max_flow,
        len(result.paths),
    )

    if as_json:
        print(result_to_json(result))
    else:
        _print_result(result)

    if output is not None:
        save_network(output, result.final_graph, source, sink)
        logger.info("Annotated network written to %s", output)


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``pipeflow`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="pipeflow",
        description="Compute maximum flow through pipe networks.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{run,inspect}",
        help="Available commands",
    )

    run_parser = subparsers.add_parser("run", help="Compute max flow for a network")
    run_parser.add_argument("network", type=Path, help="Network document (JSON/YAML)")
    run_parser.add_argument("--source", "-s", help="Override the source node")
    run_parser.add_argument("--sink", "-t", help="Override the sink node")
    run_parser.add_argument(
        "--strict",
        action="store_const",
        const=True,
        default=None,
        help="Account flow per arc when arcs run in both directions",
    )
    run_parser.add_argument(
        "--max-iterations",
        type=int,
        default=None,
        help="Fail if more augmenting paths than this are needed",
    )
    run_parser.add_argument(
        "--json", action="store_true", help="Print the result as JSON"
    )
    run_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write the network with computed flows to this file",
    )

    inspect_parser = subparsers.add_parser(
        "inspect", help="Validate and summarize a network"
    )
    inspect_parser.add_argument(
        "network", type=Path, help="Network document (JSON/YAML)"
    )

    effective_args = sys.argv[1:] if argv is None else argv
    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    if args.verbose:
        set_global_log_level(logging.DEBUG)
        logger.debug("Debug logging enabled")
    elif args.quiet or getattr(args, "json", False):
        set_global_log_level(logging.WARNING)
    else:
        set_global_log_level(logging.INFO)

    try:
        if args.command == "run":
            _run_network(
                path=args.network,
                source=args.source,
                sink=args.sink,
                strict=args.strict,
                max_iterations=args.max_iterations,
                as_json=args.json,
                output=args.output,
            )
        elif args.command == "inspect":
            _inspect_network(args.network)
    except FileNotFoundError as exc:
        logger.error("File not found: %s", exc.filename)
        raise SystemExit(1) from exc
    except PipeflowError as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
