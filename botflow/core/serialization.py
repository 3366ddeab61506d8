"""
JSON serialization for FlowGraph objects.

The wire format uses the camelCase keys that flow editors export, e.g.:

    {
      "id": "main",
      "name": "Lead form",
      "blocks": [{"id": "b1", "title": "Start", "steps": [
          {"id": "s1", "type": "start", "outgoingEdgeId": "e1"}]}],
      "edges": [{"id": "e1", "from": {"blockId": "b1", "stepId": "s1"},
                 "to": {"blockId": "b2"}}],
      "variables": [{"id": "v1", "name": "Email"}]
    }
"""

import json
from typing import Dict, Any

from botflow.core.errors import FlowGraphError
from botflow.core.ir import FlowGraph, Block, Step, Edge, Locator, Variable


def _require(data: Dict[str, Any], key: str, where: str) -> Any:
    if not isinstance(data, dict):
        raise FlowGraphError(f"Expected an object for {where}, got {type(data).__name__}.")
    if key not in data:
        raise FlowGraphError(f"Missing '{key}' in {where}.")
    return data[key]


def _locator_to_dict(locator: Locator) -> Dict[str, Any]:
    data = {"blockId": locator.block_id}
    if locator.step_id is not None:
        data["stepId"] = locator.step_id
    return data


def _locator_from_dict(data: Dict[str, Any], where: str) -> Locator:
    return Locator(block_id=_require(data, "blockId", where), step_id=data.get("stepId"))


class JsonSerializer:
    """Serializes and deserializes FlowGraph objects to/from JSON."""

    @staticmethod
    def to_dict(graph: FlowGraph) -> Dict[str, Any]:
        blocks_data = []
        for block in graph.blocks:
            steps_data = []
            for step in block.steps:
                step_data = {
                    "id": step.id,
                    "type": step.type,
                    "blockId": step.block_id,
                    "content": step.content,
                }
                if step.outgoing_edge_id is not None:
                    step_data["outgoingEdgeId"] = step.outgoing_edge_id
                steps_data.append(step_data)
            blocks_data.append({"id": block.id, "title": block.title, "steps": steps_data})

        edges_data = []
        for edge in graph.edges.values():
            edges_data.append({
                "id": edge.id,
                "from": _locator_to_dict(edge.source),
                "to": _locator_to_dict(edge.target),
                "metadata": edge.metadata,
            })

        variables_data = []
        for variable in graph.variables:
            var_data = {"id": variable.id, "name": variable.name}
            if variable.value is not None:
                var_data["value"] = variable.value
            variables_data.append(var_data)

        return {
            "id": graph.id,
            "name": graph.name,
            "metadata": graph.metadata,
            "blocks": blocks_data,
            "edges": edges_data,
            "variables": variables_data,
        }

    @staticmethod
    def to_json(graph: FlowGraph, indent: int = 2) -> str:
        return json.dumps(JsonSerializer.to_dict(graph), indent=indent)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> FlowGraph:
        graph_id = _require(data, "id", "flow graph")
        graph = FlowGraph(
            name=data.get("name", "LoadedFlowGraph"),
            graph_id=graph_id,
            metadata=data.get("metadata"),
        )

        for block_data in data.get("blocks", []):
            block_id = _require(block_data, "id", "block")
            block = Block(title=block_data.get("title", ""), block_id=block_id)
            for step_data in block_data.get("steps", []):
                block.add_step(Step(
                    block_id=step_data.get("blockId", block_id),
                    step_type=step_data.get("type", "text"),
                    step_id=_require(step_data, "id", f"step of block {block_id}"),
                    content=step_data.get("content"),
                    outgoing_edge_id=step_data.get("outgoingEdgeId"),
                ))
            graph.add_block(block)

        for edge_data in data.get("edges", []):
            edge_id = _require(edge_data, "id", "edge")
            graph.add_edge(Edge(
                source=_locator_from_dict(_require(edge_data, "from", f"edge {edge_id}"), f"edge {edge_id} source"),
                target=_locator_from_dict(_require(edge_data, "to", f"edge {edge_id}"), f"edge {edge_id} target"),
                edge_id=edge_id,
                metadata=edge_data.get("metadata"),
            ))

        for var_data in data.get("variables", []):
            graph.add_variable(Variable(
                name=_require(var_data, "name", "variable"),
                variable_id=_require(var_data, "id", "variable"),
                value=var_data.get("value"),
            ))

        return graph

    @staticmethod
    def from_json(json_str: str) -> FlowGraph:
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise FlowGraphError(f"Invalid flow graph JSON: {e}") from e
        return JsonSerializer.from_dict(data)
