import json
import os

import pytest
from botflow.core.errors import FlowGraphError
from botflow.core.ir import Locator
from botflow.core.serialization import JsonSerializer


def test_to_dict_uses_wire_format(two_block_graph):
    data = JsonSerializer.to_dict(two_block_graph)

    assert data["id"] == "G"
    assert [b["id"] for b in data["blocks"]] == ["A", "B"]

    s1 = data["blocks"][0]["steps"][0]
    assert s1["outgoingEdgeId"] == "e1"
    assert s1["blockId"] == "A"
    assert "outgoingEdgeId" not in data["blocks"][1]["steps"][0]

    edge = data["edges"][0]
    assert edge["from"] == {"blockId": "A", "stepId": "s1"}
    assert edge["to"] == {"blockId": "B"}

    assert {"id": "v-name", "name": "name"} in data["variables"]


def test_json_roundtrip(survey_graph):
    json_str = JsonSerializer.to_json(survey_graph)

    graph = JsonSerializer.from_json(json_str)
    assert graph.id == survey_graph.id
    assert [b.id for b in graph.blocks] == [b.id for b in survey_graph.blocks]
    assert graph.get_edge("e-pro").target == Locator("pro", "pro-body")
    assert graph.get_step("ask", "ask-cond").content["equals"] == "pro"
    assert graph.find_variable("plan").id == "v-plan"


def test_from_json_example_file(examples_dir):
    with open(os.path.join(examples_dir, "lead_form.json"), encoding="utf-8") as f:
        graph = JsonSerializer.from_json(f.read())

    assert graph.id == "lead-form"
    assert graph.start_edge_id == "e-start"
    assert graph.get_block("ask-email").steps[2].type == "link"
    assert graph.get_edge("e-after-link").source == Locator("ask-email", "a-link")


def test_step_block_id_defaults_to_owning_block():
    graph = JsonSerializer.from_dict({
        "id": "g",
        "blocks": [{"id": "b", "steps": [{"id": "s"}]}],
    })
    step = graph.get_step("b", "s")
    assert step.block_id == "b"
    assert step.type == "text"
    assert step.outgoing_edge_id is None


def test_value_of_variable_is_loaded():
    graph = JsonSerializer.from_dict({
        "id": "g",
        "variables": [{"id": "v", "name": "Lang", "value": "en"}],
    })
    assert graph.get_variable("v").value == "en"


@pytest.mark.parametrize("data", [
    {"name": "no id"},
    {"id": "g", "blocks": [{"title": "no id"}]},
    {"id": "g", "blocks": [{"id": "b", "steps": [{"type": "text"}]}]},
    {"id": "g", "edges": [{"id": "e", "to": {"blockId": "b"}}]},
    {"id": "g", "edges": [{"id": "e", "from": {"stepId": "s"}, "to": {"blockId": "b"}}]},
    {"id": "g", "variables": [{"id": "v"}]},
    ["not", "an", "object"],
])
def test_corrupt_shape_raises(data):
    with pytest.raises(FlowGraphError):
        JsonSerializer.from_dict(data)


def test_invalid_json_raises():
    with pytest.raises(FlowGraphError, match="Invalid flow graph JSON"):
        JsonSerializer.from_json("{not json")


def test_to_json_is_valid_json(two_block_graph):
    data = json.loads(JsonSerializer.to_json(two_block_graph))
    assert data["name"] == "Two blocks"
