"""Namespace-keyed lookup table over the parser's raw type records."""

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .records import RawTypeRecord

logger = logging.getLogger(__name__)


class SchemaTypeIndex:
    """Immutable index: namespace URI -> {type name -> RawTypeRecord}.

    Iteration over namespaces, and over types within a namespace, follows the
    insertion order of the input. The resolver's tie-breaking depends on it.
    """

    def __init__(self, table: Dict[str, Dict[str, RawTypeRecord]]) -> None:
        self._table = {
            namespace: MappingProxyType(types) for namespace, types in table.items()
        }

    @classmethod
    def build(cls, raw_types_by_namespace: Mapping[str, Mapping[str, Any]]) -> "SchemaTypeIndex":
        """Copy the parser's per-namespace type maps into a new index.

        Records may be RawTypeRecord instances or loose mappings; loose ones
        are coerced. No validation or deduplication beyond that.
        """
        table: Dict[str, Dict[str, RawTypeRecord]] = {}
        for namespace, types in raw_types_by_namespace.items():
            table[namespace] = {
                name: RawTypeRecord.coerce(name, record) for name, record in types.items()
            }

        index = cls(table)
        logger.debug(
            "Built type index: %d namespaces, %d types",
            len(index),
            sum(len(types) for types in table.values()),
        )
        return index

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, namespace: object) -> bool:
        return namespace in self._table

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def namespaces(self) -> List[str]:
        """Get namespace URIs in index order."""
        return list(self._table)

    def types_in(self, namespace: str) -> Mapping[str, RawTypeRecord]:
        """Get a read-only view of the types declared in a namespace (empty if unknown)."""
        return self._table.get(namespace, MappingProxyType({}))

    def contains(self, namespace: Optional[str], name: str) -> bool:
        types = self._table.get(namespace)
        return types is not None and name in types

    def get(self, namespace: Optional[str], name: str) -> Optional[RawTypeRecord]:
        """Get a record by namespace and local name, or None."""
        types = self._table.get(namespace)
        if types is None:
            return None
        return types.get(name)

    def items(self) -> Iterator[Tuple[str, Mapping[str, RawTypeRecord]]]:
        """Iterate (namespace, types) pairs in index order."""
        return iter(self._table.items())
