"""Public API for wsdldoc.

``Document`` is the query surface over one WSDL document. Everything is lazy:
the document is acquired and parsed on the first query that needs it, and the
type index, resolver and definition caches are built on first use and kept for
the lifetime of the instance.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

import httpx

from wsdldoc._internal.io.source import DocumentRef, describe, determine_base_path, read_document
from wsdldoc._internal.parser import ParsedDocument, parse_document
from wsdldoc.codes import ElementFormDefault
from wsdldoc.contracts import AcquisitionOptions, CacheCounters, CacheInfo
from wsdldoc.errors import ConfigurationError
from wsdldoc.kernel.binder import OperationTypeBinder, find_operation
from wsdldoc.kernel.cache import DocumentCaches
from wsdldoc.kernel.definitions import TypeDefinitionCache
from wsdldoc.kernel.namespaces import is_user_defined, split_qname
from wsdldoc.kernel.records import Operation, TypeDefinition
from wsdldoc.kernel.resolver import TypeResolver
from wsdldoc.kernel.type_index import SchemaTypeIndex

logger = logging.getLogger(__name__)

# Distinguishes "base_path not given" from an explicit None.
_UNSET: Any = object()

TypeNamespaceEntry = Tuple[Tuple[str, ...], Optional[str]]
TypeReferenceEntry = Tuple[Tuple[str, str], str]


def _passthrough(attribute: str, doc: str) -> property:
    """Property that reads a parsed scalar unless it was overridden by assignment."""

    def getter(self: "Document") -> Optional[str]:
        if attribute in self._overrides:
            return self._overrides[attribute]
        return getattr(self.parsed, attribute)

    def setter(self: "Document", value: Optional[str]) -> None:
        self._overrides[attribute] = value

    return property(getter, setter, doc=doc)


class Document:
    """A WSDL document with memoized type resolution.

    The first query that needs parser output acquires the document (literal
    text, file path or URL) and parses it, once. Querying parser output
    without a document raises ConfigurationError.

    Not thread-safe: the memo caches assume one thread per instance.

    Args:
        document: Literal WSDL text, a file path, or an http(s) URL
        base_path: Path or URL that relative schemaLocation attributes resolve
            against. When omitted it is derived from ``document`` (the file's
            absolute path or the URL; none for literal text). Pass None
            explicitly to turn off external schema loading.
        options: Acquisition settings (timeout, headers, external schemas)
        client: httpx client used for URL documents instead of a fresh one
    """

    def __init__(
        self,
        document: Optional[DocumentRef] = None,
        *,
        base_path: Optional[str] = _UNSET,
        options: Optional[AcquisitionOptions] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.document = document
        self.options = options or AcquisitionOptions()
        self.client = client
        self._base_path = base_path
        self._xml: Optional[str] = None
        self._parsed: Optional[ParsedDocument] = None
        self._overrides: Dict[str, Optional[str]] = {}
        self._caches = DocumentCaches()
        self._index: Optional[SchemaTypeIndex] = None
        self._resolver: Optional[TypeResolver] = None
        self._definitions: Optional[TypeDefinitionCache] = None
        self._binder: Optional[OperationTypeBinder] = None
        self._type_namespaces: Optional[List[TypeNamespaceEntry]] = None
        self._type_references: Optional[List[TypeReferenceEntry]] = None

    @staticmethod
    def validate_element_form_default(value: Union[str, ElementFormDefault]) -> str:
        """Return the attribute value, or raise ConfigurationError if it is not allowed."""
        try:
            return ElementFormDefault(value).value
        except ValueError:
            raise ConfigurationError(
                f"Invalid value for elementFormDefault: {value!r}. "
                f"Must be one of: {ElementFormDefault.values()}"
            ) from None

    # Lifecycle

    @property
    def base_path(self) -> Optional[str]:
        """Path or URL that relative schema locations resolve against."""
        if self._base_path is not _UNSET:
            return self._base_path
        return determine_base_path(self.document)

    @property
    def xml(self) -> str:
        """Raw document text. Assign to bypass acquisition."""
        if self._xml is None:
            self._require_document()
            self._xml = read_document(self.document, options=self.options, client=self.client)
        return self._xml

    @xml.setter
    def xml(self, value: str) -> None:
        self._xml = value

    @property
    def parsed(self) -> ParsedDocument:
        """Structural parser output, produced on first access."""
        if self._parsed is None:
            self._require_document()
            logger.debug("Parsing %s (base path: %s)", describe(self.document), self.base_path)
            self._parsed = parse_document(
                self.xml,
                self.base_path,
                loader=self._load_schema,
                load_external_schemas=self.options.load_external_schemas,
            )
        return self._parsed

    def _require_document(self) -> None:
        if self.document is None:
            raise ConfigurationError("wsdldoc needs a WSDL document")

    def _load_schema(self, location: str) -> str:
        return read_document(location, options=self.options, client=self.client)

    # Passthrough accessors

    endpoint = _passthrough("endpoint", "SOAP endpoint URL.")
    namespace = _passthrough("namespace", "Target namespace of the document.")
    service_name = _passthrough("service_name", "Name of the first service element.")

    @property
    def element_form_default(self) -> str:
        """elementFormDefault of the first schema, "unqualified" without a document."""
        if "element_form_default" in self._overrides:
            return self._overrides["element_form_default"]
        if self.document is None:
            return ElementFormDefault.UNQUALIFIED.value
        return self.parsed.element_form_default

    @element_form_default.setter
    def element_form_default(self, value: Union[str, ElementFormDefault]) -> None:
        self._overrides["element_form_default"] = self.validate_element_form_default(value)

    @property
    def namespaces(self) -> Dict[str, str]:
        """Namespace prefix table (prefix -> URI)."""
        return self.parsed.namespaces

    @property
    def operations(self) -> Dict[str, Operation]:
        return self.parsed.operations

    @property
    def soap_actions(self) -> List[str]:
        """Operation keys in document order."""
        return list(self.operations)

    def soap_action(self, key: str) -> Optional[str]:
        operation = find_operation(self.operations, key)
        return operation.action if operation else None

    def soap_input(self, key: str) -> Optional[str]:
        operation = find_operation(self.operations, key)
        return operation.input if operation else None

    def operation_input_parameters(self, key: str) -> Optional[Dict[str, Dict[str, Optional[str]]]]:
        """Input parameters of an operation, keyed by name in declared order."""
        operation = find_operation(self.operations, key)
        return dict(operation.parameters) if operation else None

    def soap_action_parameters(self, key: str) -> Optional[List[str]]:
        """Input parameter names of an operation in declared order."""
        parameters = self.operation_input_parameters(key)
        return list(parameters) if parameters is not None else None

    # Type resolution

    @property
    def type_index(self) -> SchemaTypeIndex:
        if self._index is None:
            self._index = SchemaTypeIndex.build(self.parsed.types)
        return self._index

    @property
    def type_resolver(self) -> TypeResolver:
        if self._resolver is None:
            self._resolver = TypeResolver(self.type_index, self.parsed.namespaces, self._caches.resolution)
        return self._resolver

    @property
    def _definition_cache(self) -> TypeDefinitionCache:
        if self._definitions is None:
            self._definitions = TypeDefinitionCache(self.type_resolver, self._caches.definitions)
        return self._definitions

    @property
    def _operation_binder(self) -> OperationTypeBinder:
        if self._binder is None:
            self._binder = OperationTypeBinder(self.operations, self._definition_cache)
        return self._binder

    def type_definition(self, type_name: Optional[str]) -> Optional[TypeDefinition]:
        """Resolved definition for a (possibly prefix-qualified) type name, or None."""
        if not type_name:
            return None
        return self._definition_cache.definition_for(type_name)

    def operation_input_type(self, operation_name: str) -> Optional[TypeDefinition]:
        return self._operation_binder.input_type_for(operation_name)

    def operation_output_type(self, operation_name: str) -> Optional[TypeDefinition]:
        return self._operation_binder.output_type_for(operation_name)

    def cache_info(self) -> CacheInfo:
        """Memoization counters for the resolution and definition caches."""
        info = self._caches.info()
        return CacheInfo(
            resolution=CacheCounters.model_validate(info["resolution"], from_attributes=True),
            definitions=CacheCounters.model_validate(info["definitions"], from_attributes=True),
        )

    # Aggregate reports

    def type_namespaces(self) -> List[TypeNamespaceEntry]:
        """Every declared type and field paired with its owning namespace.

        Entries are ``((type,), namespace)`` followed by one
        ``((type, field), namespace)`` per field.
        """
        if self._type_namespaces is None:
            entries: List[TypeNamespaceEntry] = []
            if self.document is not None:
                for types in self.parsed.types.values():
                    for type_name, record in types.items():
                        entries.append(((type_name,), record.namespace))
                        for field_name in record.order:
                            entries.append(((type_name, field_name), record.namespace))
            self._type_namespaces = entries
        return self._type_namespaces

    def type_definitions(self) -> List[TypeReferenceEntry]:
        """Fields whose referenced type is user-defined, as ``((type, field), tag)``.

        ``tag`` is the local part of the field's type, the name to recurse into.
        Fields without a type attribute are skipped.
        """
        if self._type_references is None:
            entries: List[TypeReferenceEntry] = []
            if self.document is not None:
                for types in self.parsed.types.values():
                    for type_name, record in types.items():
                        for field_name in record.order:
                            field_type = record.fields[field_name].type
                            if not field_type:
                                continue
                            prefix, tag = split_qname(field_type)
                            if self.is_user_defined(prefix):
                                entries.append(((type_name, field_name), tag))
            self._type_references = entries
        return self._type_references

    def is_user_defined(self, prefix: Optional[str]) -> bool:
        """True unless ``prefix`` maps to a standards namespace (XML Schema, SOAP, WSDL)."""
        return is_user_defined(self.namespaces, prefix)

    user_defined = is_user_defined
