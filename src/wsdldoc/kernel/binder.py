"""Binds operations to the type definitions of their input and output messages."""

import re
from collections.abc import Mapping
from typing import Optional

from .definitions import TypeDefinitionCache
from .records import Operation, TypeDefinition
from .resolver import TYPE_SUFFIX

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")


def operation_key(name: str) -> str:
    """Snake-case an operation name: ``GetUserByID`` -> ``get_user_by_id``."""
    key = name.replace("::", "/")
    key = _ACRONYM_BOUNDARY.sub(r"\1_\2", key)
    key = _WORD_BOUNDARY.sub(r"\1_\2", key)
    return key.replace(".", "_").replace("-", "_").lower()


def find_operation(operations: Mapping[str, Operation], name: str) -> Optional[Operation]:
    """Look an operation up by its key, then by the snake-cased form of ``name``."""
    operation = operations.get(name)
    if operation is None:
        operation = operations.get(operation_key(name))
    return operation


class OperationTypeBinder:
    """Resolves an operation's declared input/output type names.

    A declared name that does not resolve is retried with the "Type" suffix.
    Unknown operations and unresolvable types both yield None.
    """

    def __init__(self, operations: Mapping[str, Operation], definitions: TypeDefinitionCache) -> None:
        self.operations = operations
        self.definitions = definitions

    def input_type_for(self, operation_name: str) -> Optional[TypeDefinition]:
        operation = find_operation(self.operations, operation_name)
        if operation is None:
            return None
        return self._bind(operation.input)

    def output_type_for(self, operation_name: str) -> Optional[TypeDefinition]:
        operation = find_operation(self.operations, operation_name)
        if operation is None:
            return None
        return self._bind(operation.output)

    def _bind(self, declared_name: Optional[str]) -> Optional[TypeDefinition]:
        if not declared_name:
            return None
        definition = self.definitions.definition_for(declared_name)
        if definition is None:
            definition = self.definitions.definition_for(declared_name + TYPE_SUFFIX)
        return definition
