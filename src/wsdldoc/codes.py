"""Enumerated values accepted by wsdldoc.

These constants prevent stringly-typed settings and ensure
client code passes values the document model understands.
"""

from enum import Enum


class ElementFormDefault(str, Enum):
    """Allowed values of a schema's elementFormDefault attribute."""

    UNQUALIFIED = "unqualified"
    QUALIFIED = "qualified"

    @classmethod
    def values(cls) -> list[str]:
        """Return the raw attribute values in declaration order."""
        return [member.value for member in cls]


class SourceKind(str, Enum):
    """How a document reference is acquired."""

    LITERAL = "literal"
    PATH = "path"
    URL = "url"
