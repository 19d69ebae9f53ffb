"""Normalized, memoized type definitions keyed by the requested type name."""

from typing import Optional

from .cache import MemoCache
from .records import TypeDefinition
from .resolver import TypeResolver


class TypeDefinitionCache:
    """Turns resolved raw records into TypeDefinition values, once per name.

    Misses are cached too, so a name that does not resolve is looked up once.
    Repeated calls for the same name return the same instance.
    """

    def __init__(self, resolver: TypeResolver, cache: Optional[MemoCache] = None) -> None:
        self.resolver = resolver
        self.cache = cache if cache is not None else MemoCache("definition")

    def definition_for(self, type_name: Optional[str]) -> Optional[TypeDefinition]:
        """Get the definition for ``type_name``, or None if it does not resolve."""
        if not type_name:
            return None
        return self.cache.get_or_compute(type_name, lambda: self._build(type_name))

    def _build(self, type_name: str) -> Optional[TypeDefinition]:
        record = self.resolver.resolve(type_name)
        if record is None:
            return None
        return TypeDefinition.from_record(type_name, record)
