"""
Command-line interface for botflow.

Usage:
    botflow ./examples/lead_form.json
    botflow ./examples/lead_form.json --var Name=Ada --answer ada@example.com
    botflow ./examples/lead_form.json --linked ./examples/newsletter.json
    botflow ./examples/lead_form.json -f mermaid -o ./build/
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Set

from botflow.core.errors import FlowGraphError, UnknownVariableError
from botflow.core.ir import FlowGraph
from botflow.core.serialization import JsonSerializer
from botflow.backend.mermaid import MermaidExporter
from botflow.backend.graphviz import GraphvizExporter
from botflow.backend.svg import SvgExporter
from botflow.engine.notifications import CallbackSink
from botflow.engine.player import AutoPlayer
from botflow.engine.session import ConversationSession


def load_graph(filepath: Path) -> FlowGraph:
    """Load a flow graph from a JSON file."""
    return JsonSerializer.from_json(filepath.read_text(encoding="utf-8"))


def _variable_value(key: str, value) -> Optional[str]:
    """Variable values are strings; JSON scalars are kept in their JSON spelling."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return json.dumps(value)
    raise ValueError(f"Variable '{key}' must be a string or scalar, got {type(value).__name__}")


def parse_variables(pairs: List[str], vars_file: Optional[Path] = None) -> Dict[str, str]:
    """Merge NAME=VALUE pairs over the contents of an optional JSON object file."""
    variables: Dict[str, str] = {}
    if vars_file is not None:
        data = json.loads(vars_file.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{vars_file} must contain a JSON object")
        for key, value in data.items():
            variables[str(key)] = _variable_value(key, value)
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise ValueError(f"Invalid variable '{pair}', expected NAME=VALUE")
        variables[name] = value
    return variables


def export_graph(graph: FlowGraph, output_path: Path, format: str, taken: Optional[Set[str]] = None) -> Path:
    """
    Export a flow graph to the specified format.

    taken holds file stems already written in this run; a graph whose name
    collides with one of them gets its id appended to the filename.
    """

    if format == "mermaid":
        content = MermaidExporter.to_mermaid(graph)
        ext = ".mmd"
    elif format == "graphviz" or format == "dot":
        content = GraphvizExporter.to_dot(graph)
        ext = ".dot"
    elif format == "svg":
        content = SvgExporter.to_svg(graph)
        ext = ".svg"
    elif format == "json":
        content = JsonSerializer.to_json(graph)
        ext = ".json"
    else:
        raise ValueError(f"Unknown format: {format}. Use: mermaid, graphviz, svg, json")

    # Sanitize the graph name for use as filename
    safe_name = graph.name.lower().replace(" ", "_").replace("/", "_")
    safe_name = "".join(c for c in safe_name if c.isalnum() or c == "_") or graph.id
    if taken is not None:
        if safe_name in taken:
            safe_id = "".join(c if c.isalnum() else "_" for c in graph.id)
            safe_name = f"{safe_name}_{safe_id}"
        taken.add(safe_name)

    output_file = output_path / f"{safe_name}{ext}"
    output_file.write_text(content, encoding="utf-8")

    return output_file


def play(
    graph: FlowGraph,
    linked: List[FlowGraph],
    variables: Dict[str, str],
    answers: List[str],
    start_block: Optional[str] = None,
    max_blocks: int = 1000,
    out=None,
) -> ConversationSession:
    """Run a conversation headlessly, printing each block as it becomes visible."""
    out = out or sys.stdout
    sink = CallbackSink(
        on_edge_visible=lambda edge: print(f"-> {edge.target.block_id} (via {edge.id})", file=out),
        on_completed=lambda: print("== completed", file=out),
    )
    session = ConversationSession(
        graph,
        sink=sink,
        predefined_variables=variables,
        start_block_id=start_block,
        linked_graphs=linked,
    )
    player = AutoPlayer(session, answers=answers, max_blocks=max_blocks)
    player.run()

    for entry in session.history:
        print(f"{entry.block.title or entry.block.id} [from step {entry.start_step_index}]", file=out)
    bound = {name: value for name, value in session.variables.values().items() if value is not None}
    if bound:
        print(f"variables: {json.dumps(bound)}", file=out)
    return session


def main(argv: List[str] = None) -> int:
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        prog="botflow",
        description="Play or export conversational flow graphs.",
        epilog="Example: botflow ./examples/lead_form.json --var Name=Ada"
    )

    parser.add_argument("input", type=Path, help="JSON file containing the flow graph")
    parser.add_argument(
        "--linked",
        type=Path,
        action="append",
        default=[],
        help="JSON file of a linked flow graph (repeatable)"
    )
    parser.add_argument("--start-block", type=str, help="Start at this block id instead of the start edge")
    parser.add_argument(
        "--var",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Predefined variable (repeatable)"
    )
    parser.add_argument("--vars-file", type=Path, help="JSON object of predefined variables")
    parser.add_argument(
        "--answer",
        action="append",
        default=[],
        help="Scripted answer for the next input step (repeatable)"
    )
    parser.add_argument("--max-blocks", type=int, default=1000, help="Stop playing after this many blocks")
    parser.add_argument(
        "-f", "--format",
        choices=["play", "mermaid", "graphviz", "dot", "svg", "json"],
        default="play",
        help="Play the conversation or export the graph (default: play)"
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=Path("."),
        help="Output directory for exports (default: current directory)"
    )
    parser.add_argument("-l", "--list", action="store_true", help="Summarize the graph without playing or exporting")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    for path in [args.input, *args.linked]:
        if not path.is_file():
            print(f"Error: File not found: {path}", file=sys.stderr)
            return 1

    try:
        graph = load_graph(args.input)
        linked = [load_graph(path) for path in args.linked]
        variables = parse_variables(args.var, args.vars_file)
    except (FlowGraphError, ValueError, OSError) as e:
        print(f"Error loading file: {e}", file=sys.stderr)
        return 1

    if args.list:
        for g in [graph, *linked]:
            print(f"{g.id}: \"{g.name}\" ({len(g.blocks)} blocks, {len(g.edges)} edges, {len(g.variables)} variables)")
        return 0

    if args.format == "play":
        try:
            play(graph, linked, variables, args.answer, start_block=args.start_block, max_blocks=args.max_blocks)
        except (FlowGraphError, UnknownVariableError) as e:
            print(f"Error playing flow: {e}", file=sys.stderr)
            return 1
        return 0

    args.output.mkdir(parents=True, exist_ok=True)
    taken: Set[str] = set()
    for g in [graph, *linked]:
        try:
            output_file = export_graph(g, args.output, args.format, taken)
        except (RuntimeError, ValueError) as e:
            print(f"Error exporting {g.name}: {e}", file=sys.stderr)
            return 1
        if args.verbose:
            print(f"Exported '{g.name}' -> {output_file}")
        else:
            print(f"{output_file}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
