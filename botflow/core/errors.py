"""Exceptions raised for programming-contract violations.

Normal traversal outcomes (missing blocks, exhausted graphs, dangling edges)
never raise; they are reported through the notification sink instead.
"""


class FlowGraphError(ValueError):
    """The flow graph does not have the shape the engine requires."""


class UnknownVariableError(KeyError):
    """A variable was referenced that the flow graph does not declare."""

    def __init__(self, key: str):
        super().__init__(key)
        self.key = key

    def __str__(self):
        return f"Unknown variable: {self.key!r}"
