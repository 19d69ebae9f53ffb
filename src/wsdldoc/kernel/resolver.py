"""Type resolution: find the single best raw type record for a type name.

Precedence for a name that is not namespace-qualified:

1. literal match in the context namespace
2. literal match in any other namespace
3. match of ``name + "Type"`` in any namespace

The lowest tier wins; within a tier the first match in index order wins. A
qualified name (``prefix:local``) whose prefix maps to an indexed namespace is
looked up there and nowhere else.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .cache import MemoCache
from .records import RawTypeRecord
from .type_index import SchemaTypeIndex

logger = logging.getLogger(__name__)

PRIORITY_CONTEXT_NAMESPACE = 1
PRIORITY_OTHER_NAMESPACE = 2
PRIORITY_TYPE_SUFFIX = 3

TYPE_SUFFIX = "Type"
QNAME_SEPARATOR = ":"

# Returned by the qualified lookup when the name must go through the scan.
_NOT_QUALIFIED = object()


@dataclass(frozen=True)
class Candidate:
    """One possible match for a lookup, tagged with its precedence tier."""
    priority: int
    sequence: int  # position in scan order, breaks ties within a tier
    namespace: str
    name: str
    record: RawTypeRecord

    @property
    def rank(self) -> Tuple[int, int]:
        return (self.priority, self.sequence)


class RankedCandidates:
    """Collects tagged candidates in scan order and picks the best one."""

    def __init__(self) -> None:
        self._candidates: List[Candidate] = []

    def add(self, priority: int, namespace: str, name: str, record: RawTypeRecord) -> None:
        self._candidates.append(
            Candidate(
                priority=priority,
                sequence=len(self._candidates),
                namespace=namespace,
                name=name,
                record=record,
            )
        )

    def ranked(self) -> List[Candidate]:
        return sorted(self._candidates, key=lambda c: c.rank)

    def best(self) -> Optional[Candidate]:
        if not self._candidates:
            return None
        return min(self._candidates, key=lambda c: c.rank)


class TypeResolver:
    """Resolves type names against a SchemaTypeIndex, memoizing every answer.

    Results, including misses, are cached under ``(type_name, context_namespace)``
    for the lifetime of the resolver's cache.
    """

    def __init__(
        self,
        index: SchemaTypeIndex,
        namespaces: Mapping[str, str],
        cache: Optional[MemoCache] = None,
    ) -> None:
        self.index = index
        self.namespaces = namespaces
        self.cache = cache if cache is not None else MemoCache("resolution")

    def resolve(
        self, type_name: Optional[str], context_namespace: Optional[str] = None
    ) -> Optional[RawTypeRecord]:
        """Return the best-matching record for ``type_name``, or None."""
        if not type_name:
            return None

        return self.cache.get_or_compute(
            (type_name, context_namespace),
            lambda: self._resolve_uncached(type_name, context_namespace),
        )

    def candidates(
        self, type_name: str, context_namespace: Optional[str] = None
    ) -> List[Candidate]:
        """Every unqualified-scan candidate for ``type_name``, best first.

        Uncached; the suffix tier is collected even when a literal match
        exists, so callers can see what the literal match shadows.
        """
        return self._collect(type_name, context_namespace).ranked()

    def _resolve_uncached(
        self, type_name: str, context_namespace: Optional[str]
    ) -> Optional[RawTypeRecord]:
        qualified = self._resolve_qualified(type_name)
        if qualified is not _NOT_QUALIFIED:
            return qualified  # type: ignore[return-value]

        best = self._collect(type_name, context_namespace).best()
        if best is None:
            logger.debug("No type found for %r (context=%r)", type_name, context_namespace)
            return None

        logger.debug(
            "Resolved %r to %s in %s (priority %d)",
            type_name, best.name, best.namespace, best.priority,
        )
        return best.record

    def _resolve_qualified(self, type_name: str) -> object:
        """Look up ``prefix:local`` in the prefix's namespace only.

        Returns the record or None when the prefix maps to an indexed
        namespace. Otherwise returns _NOT_QUALIFIED and the full name goes
        through the regular scan unchanged.
        """
        if QNAME_SEPARATOR not in type_name:
            return _NOT_QUALIFIED

        prefix, local_name = type_name.split(QNAME_SEPARATOR, 1)
        namespace_uri = self.namespaces.get(prefix)
        if namespace_uri is None or namespace_uri not in self.index:
            return _NOT_QUALIFIED

        return self.index.get(namespace_uri, local_name)

    def _collect(self, type_name: str, context_namespace: Optional[str]) -> RankedCandidates:
        candidates = RankedCandidates()

        # Literal match in the context namespace
        if context_namespace is not None:
            record = self.index.get(context_namespace, type_name)
            if record is not None:
                candidates.add(PRIORITY_CONTEXT_NAMESPACE, context_namespace, type_name, record)

        # Literal match in any other namespace
        for namespace, types in self.index.items():
            if namespace == context_namespace:
                continue
            record = types.get(type_name)
            if record is not None:
                candidates.add(PRIORITY_OTHER_NAMESPACE, namespace, type_name, record)

        # Naming convention: "Foo" declared as "FooType"
        suffixed = type_name + TYPE_SUFFIX
        for namespace, types in self.index.items():
            record = types.get(suffixed)
            if record is not None:
                candidates.add(PRIORITY_TYPE_SUFFIX, namespace, suffixed, record)

        return candidates
