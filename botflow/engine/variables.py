"""Variable store for a single conversation session."""

import logging
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from botflow.core.errors import UnknownVariableError
from botflow.core.ir import Variable

logger = logging.getLogger(__name__)


class VariableStore:
    """
    Maps variable identity to an optional bound value.

    Variables are looked up by id first, then by case-insensitive name.
    The store works on its own copies, so binding never mutates the
    authored FlowGraph.
    """

    def __init__(self, variables: Iterable[Variable] = ()):
        self._variables: Dict[str, Variable] = {}
        self.register(variables)

    def register(self, variables: Iterable[Variable]) -> None:
        """Add variables (e.g. from a linked graph). Known ids are kept as they are."""
        for variable in variables:
            if variable.id not in self._variables:
                self._variables[variable.id] = variable.with_value(variable.value)

    def resolve(self, name_or_id: str) -> Optional[Variable]:
        if name_or_id in self._variables:
            return self._variables[name_or_id]
        key = name_or_id.lower()
        return next((v for v in self._variables.values() if v.name.lower() == key), None)

    def get(self, name_or_id: str) -> Optional[str]:
        variable = self.resolve(name_or_id)
        return variable.value if variable else None

    def bind(self, name_or_id: str, value: Optional[str]) -> Variable:
        """Set a variable's value, overwriting any prior value."""
        variable = self.resolve(name_or_id)
        if variable is None:
            raise UnknownVariableError(name_or_id)
        variable.value = value
        logger.debug("Bound variable %s (%s) = %r", variable.name, variable.id, value)
        return variable

    def inject_predefined(
        self,
        external: Optional[Mapping[str, Optional[str]]],
        strict: bool = False,
    ) -> List[Variable]:
        """
        Pre-bind variables from an external name -> value map.

        Keys are matched case-insensitively against variable names. Entries
        with no match, with an empty value, or whose variable is already
        bound are skipped. Returns copies of the variables actually bound, in
        the order the external map was iterated.

        Args:
            external: Predefined values, typically from the embedding page.
            strict: Raise UnknownVariableError for keys that match nothing.
        """
        prefilled: List[Variable] = []
        for key, value in (external or {}).items():
            key_lower = key.lower()
            match = next((v for v in self._variables.values() if v.name.lower() == key_lower), None)
            if match is None:
                if strict:
                    raise UnknownVariableError(key)
                logger.debug("Predefined variable %r matches no variable, skipped", key)
                continue
            if not value:
                continue
            if match.value is not None:
                logger.debug("Variable %s already bound, predefined value ignored", match.name)
                continue
            self.bind(match.id, value)
            prefilled.append(match.with_value(value))
        return prefilled

    def values(self) -> Dict[str, Optional[str]]:
        """Name -> value mapping of every known variable."""
        return {v.name: v.value for v in self._variables.values()}

    def __contains__(self, name_or_id: str) -> bool:
        return self.resolve(name_or_id) is not None

    def __iter__(self) -> Iterator[Variable]:
        return iter(self._variables.values())

    def __len__(self) -> int:
        return len(self._variables)
