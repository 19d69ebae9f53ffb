"""Pydantic models for raw schema records and their normalized public form.

Raw records are what the structural parser hands to the kernel. They are typed
once, at the boundary: reserved metadata (namespace, order, base_type) lives in
named attributes and field entries live in an explicit ``fields`` mapping, so
nothing downstream filters sentinel keys out of a loose dict.
"""

import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator


# Keys of the loose parser shape that carry type metadata instead of a field.
RESERVED_KEYS = frozenset({"namespace", "order", "order!", "base_type"})

UNBOUNDED = "unbounded"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _leading_int(value: Optional[str]) -> int:
    """Read a leading integer from an occurrence attribute, 0 when there is none."""
    if value is None:
        return 0
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else 0


def _as_attribute_string(value: Any) -> Optional[str]:
    """Normalize an attribute value to the string form found in XML."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _read_only(fields: Mapping[str, Any]) -> Mapping[str, Any]:
    """Snapshot a field mapping behind a read-only view."""
    return MappingProxyType(dict(fields))


class RawFieldRecord(BaseModel):
    """One element declaration inside a schema type, attributes as written."""
    type: Optional[str] = None
    min_occurs: Optional[str] = Field(None, alias="minOccurs")
    max_occurs: Optional[str] = Field(None, alias="maxOccurs")
    nillable: Optional[str] = None

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @field_validator("type", "min_occurs", "max_occurs", "nillable", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> Optional[str]:
        """Attributes are strings in XML; accept ints and bools from hand-built input."""
        return _as_attribute_string(v)


class RawTypeRecord(BaseModel):
    """As-parsed representation of one schema type.

    ``order`` and ``fields`` always describe the same set of names: names in
    ``order`` without a field record are dropped, and field records missing
    from ``order`` are appended in mapping order. ``fields`` is a read-only view.
    """
    name: str
    namespace: Optional[str] = None
    order: tuple[str, ...] = ()
    base_type: Optional[str] = None
    fields: Mapping[str, RawFieldRecord] = Field(default_factory=dict, validate_default=True)

    model_config = ConfigDict(frozen=True)

    @field_validator("fields")
    @classmethod
    def freeze_fields(cls, v: Mapping[str, RawFieldRecord]) -> Mapping[str, RawFieldRecord]:
        return _read_only(v)

    @field_serializer("fields")
    def dump_fields(self, fields: Mapping[str, RawFieldRecord]) -> Dict[str, RawFieldRecord]:
        return dict(fields)

    @model_validator(mode="before")
    @classmethod
    def align_order_and_fields(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data

        data = dict(data)
        fields = data.get("fields") or {}
        declared = data.get("order") or ()

        order: List[str] = []
        for name in declared:
            if name in fields and name not in order:
                order.append(name)
        for name in fields:
            if name not in order:
                order.append(name)

        data["order"] = tuple(order)
        return data

    @classmethod
    def coerce(cls, name: str, value: Any) -> "RawTypeRecord":
        """Build a record from either a RawTypeRecord or the loose parser mapping.

        In the loose shape, ``namespace``, ``order`` (or ``order!``) and
        ``base_type`` are metadata and every other key is a field entry. Field
        entries whose value is not a mapping are malformed and skipped.
        """
        if isinstance(value, RawTypeRecord):
            if value.name == name:
                return value
            return value.model_copy(update={"name": name})

        if not isinstance(value, Mapping):
            raise TypeError(
                f"Type record for '{name}' must be a mapping, got {type(value).__name__}"
            )

        fields: Dict[str, RawFieldRecord] = {}
        for key, entry in value.items():
            if key in RESERVED_KEYS:
                continue
            if isinstance(entry, RawFieldRecord):
                fields[key] = entry
            elif isinstance(entry, Mapping):
                fields[key] = RawFieldRecord.model_validate(dict(entry))

        order = value.get("order")
        if order is None:
            order = value.get("order!")

        return cls(
            name=name,
            namespace=value.get("namespace"),
            order=tuple(order or ()),
            base_type=value.get("base_type"),
            fields=fields,
        )


class FieldDescriptor(BaseModel):
    """Normalized, presentation-ready description of one field."""
    type: Optional[str] = None
    required: bool
    array: bool
    min_occurs: Optional[str] = None
    max_occurs: Optional[str] = None
    nillable: bool = False

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_raw(cls, raw: RawFieldRecord) -> "FieldDescriptor":
        """Derive flags from the raw occurrence and nillable attributes.

        A missing minOccurs means required. maxOccurs makes a field an array
        when it is "unbounded" or an integer greater than one.
        """
        return cls(
            type=raw.type,
            required=raw.min_occurs != "0",
            array=raw.max_occurs == UNBOUNDED or _leading_int(raw.max_occurs) > 1,
            min_occurs=raw.min_occurs,
            max_occurs=raw.max_occurs,
            nillable=raw.nillable == "true",
        )


class TypeDefinition(BaseModel):
    """Resolved, public representation of a schema type.

    ``name`` is the name the caller asked for, which differs from the matched
    record's name when the lookup went through the "Type" suffix convention.
    Definitions are shared through the document's cache, so ``fields`` is a
    read-only view.
    """
    name: str
    namespace: Optional[str] = None
    fields: Mapping[str, FieldDescriptor] = Field(default_factory=dict, validate_default=True)
    order: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)

    @field_validator("fields")
    @classmethod
    def freeze_fields(cls, v: Mapping[str, FieldDescriptor]) -> Mapping[str, FieldDescriptor]:
        return _read_only(v)

    @field_serializer("fields")
    def dump_fields(self, fields: Mapping[str, FieldDescriptor]) -> Dict[str, FieldDescriptor]:
        return dict(fields)

    @classmethod
    def from_record(cls, name: str, record: RawTypeRecord) -> "TypeDefinition":
        """Normalize a raw record, keeping its namespace and field order verbatim."""
        return cls(
            name=name,
            namespace=record.namespace,
            fields={
                field_name: FieldDescriptor.from_raw(raw)
                for field_name, raw in record.fields.items()
            },
            order=record.order,
        )

    def field(self, name: str) -> Optional[FieldDescriptor]:
        """Get a field descriptor by name, or None."""
        return self.fields.get(name)


class Operation(BaseModel):
    """A SOAP operation as reported by the structural parser."""
    name: str
    action: Optional[str] = None
    input: Optional[str] = None
    output: Optional[str] = None
    parameters: Dict[str, Dict[str, Optional[str]]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def coerce(cls, key: str, value: Any) -> "Operation":
        """Build an operation from either an Operation or a plain mapping."""
        if isinstance(value, Operation):
            return value
        data = dict(value)
        data.setdefault("name", key)
        return cls.model_validate(data)
