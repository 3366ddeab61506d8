import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional, Any


@dataclass(frozen=True)
class Locator:
    """Points at a block, and optionally at a step inside it."""
    block_id: str
    step_id: Optional[str] = None


class Variable:
    """A named slot that steps can read and write during a conversation."""
    def __init__(self, name: str, variable_id: Optional[str] = None, value: Optional[str] = None):
        self.id = variable_id if variable_id else str(uuid.uuid4())
        self.name = name
        self.value = value

    def with_value(self, value: Optional[str]) -> "Variable":
        return Variable(self.name, variable_id=self.id, value=value)

    def __eq__(self, other):
        if not isinstance(other, Variable):
            return NotImplemented
        return (self.id, self.name, self.value) == (other.id, other.name, other.value)

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return f"<Variable id={self.id} name='{self.name}' value={self.value!r}>"


class Step:
    """Smallest unit of a block. May declare the edge to follow once it completes."""
    def __init__(
        self,
        block_id: str,
        step_type: str = "text",
        step_id: Optional[str] = None,
        content: Optional[Dict[str, Any]] = None,
        outgoing_edge_id: Optional[str] = None,
    ):
        self.id = step_id if step_id else str(uuid.uuid4())
        self.block_id = block_id
        self.type = step_type
        self.content = content or {}
        self.outgoing_edge_id = outgoing_edge_id

    def __repr__(self):
        return f"<Step id={self.id} type={self.type} block={self.block_id}>"


class Block:
    """A titled group of ordered steps shown together."""
    def __init__(self, title: str = "", block_id: Optional[str] = None, steps: Optional[List[Step]] = None):
        self.id = block_id if block_id else str(uuid.uuid4())
        self.title = title
        self.steps: List[Step] = []
        for step in steps or []:
            self.add_step(step)

    def add_step(self, step: Step) -> Step:
        if step.block_id != self.id:
            raise ValueError(f"Step {step.id} belongs to block {step.block_id}, not {self.id}.")
        if any(s.id == step.id for s in self.steps):
            raise ValueError(f"Step with id {step.id} already exists in block {self.id}.")
        self.steps.append(step)
        return step

    def get_step(self, step_id: str) -> Optional[Step]:
        return next((s for s in self.steps if s.id == step_id), None)

    def step_index(self, step_id: str) -> Optional[int]:
        for idx, step in enumerate(self.steps):
            if step.id == step_id:
                return idx
        return None

    def __repr__(self):
        return f"<Block id={self.id} title='{self.title}' steps={len(self.steps)}>"


class Edge:
    """A directed link from a source step to a target block (and optional step)."""
    def __init__(
        self,
        source: Locator,
        target: Locator,
        edge_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        self.id = edge_id if edge_id else str(uuid.uuid4())
        self.source = source
        self.target = target
        self.metadata = metadata or {}

    @property
    def is_synthetic(self) -> bool:
        return bool(self.metadata.get("synthetic"))

    def __repr__(self):
        return f"<Edge id={self.id} {self.source.block_id} -> {self.target.block_id}>"


class FlowGraph:
    """Blocks, edges and variables that together define one conversation."""
    def __init__(self, name: str = "FlowGraph", graph_id: Optional[str] = None, metadata: Optional[Dict[str, Any]] = None):
        self.id = graph_id if graph_id else str(uuid.uuid4())
        self.name = name
        self.blocks: List[Block] = []
        self.edges: Dict[str, Edge] = {}
        self.variables: List[Variable] = []
        self.metadata = metadata or {}
        self._blocks_by_id: Dict[str, Block] = {}

    def add_block(self, block: Block) -> Block:
        if block.id in self._blocks_by_id:
            raise ValueError(f"Block with id {block.id} already exists.")
        self.blocks.append(block)
        self._blocks_by_id[block.id] = block
        return block

    def add_edge(self, edge: Edge) -> Edge:
        # Targets are not checked: a dangling edge ends the conversation at runtime.
        if edge.id in self.edges:
            raise ValueError(f"Edge with id {edge.id} already exists.")
        self.edges[edge.id] = edge
        return edge

    def add_variable(self, variable: Variable) -> Variable:
        if any(v.id == variable.id for v in self.variables):
            raise ValueError(f"Variable with id {variable.id} already exists.")
        self.variables.append(variable)
        return variable

    def get_block(self, block_id: Optional[str]) -> Optional[Block]:
        if block_id is None:
            return None
        return self._blocks_by_id.get(block_id)

    def get_edge(self, edge_id: Optional[str]) -> Optional[Edge]:
        if edge_id is None:
            return None
        return self.edges.get(edge_id)

    def get_step(self, block_id: str, step_id: str) -> Optional[Step]:
        block = self.get_block(block_id)
        return block.get_step(step_id) if block else None

    def get_variable(self, variable_id: str) -> Optional[Variable]:
        return next((v for v in self.variables if v.id == variable_id), None)

    def find_variable(self, name: str) -> Optional[Variable]:
        """Case-insensitive lookup by display name."""
        key = name.lower()
        return next((v for v in self.variables if v.name.lower() == key), None)

    @property
    def start_edge_id(self) -> Optional[str]:
        """Outgoing edge of the first step of the first block, if any."""
        if not self.blocks or not self.blocks[0].steps:
            return None
        return self.blocks[0].steps[0].outgoing_edge_id

    def __repr__(self):
        return f"<FlowGraph id={self.id} name='{self.name}' blocks={len(self.blocks)} edges={len(self.edges)}>"
