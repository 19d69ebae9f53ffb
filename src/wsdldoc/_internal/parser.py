"""Structural parser for WSDL 1.1 documents (internal).

Walks the raw XML once and produces the flat maps the kernel consumes:
namespace prefixes, operations, and per-namespace raw type records. WSDL
elements are matched by local name; schema content is matched in the XML
Schema namespace.
"""

import io
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Set, Tuple
from xml.etree.ElementTree import Element

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from wsdldoc.codes import ElementFormDefault
from wsdldoc.errors import AcquisitionError, DocumentParseError
from wsdldoc.kernel.binder import operation_key
from wsdldoc.kernel.namespaces import split_qname
from wsdldoc.kernel.records import Operation, RawFieldRecord, RawTypeRecord
from wsdldoc.kernel.resolver import TYPE_SUFFIX

from .io.source import read_document, resolve_location

logger = logging.getLogger(__name__)

XSD_NS = "http://www.w3.org/2001/XMLSchema"
XS = f"{{{XSD_NS}}}"

# Key under which the default (unprefixed) namespace declaration is stored.
DEFAULT_NAMESPACE_PREFIX = "xmlns"

_GROUPS = ("sequence", "choice", "all")
_DERIVATIONS = ("extension", "restriction")
_CONTENT_MODELS = ("complexContent", "simpleContent")

SchemaLoader = Callable[[str], str]


@dataclass
class ParsedDocument:
    """Everything the kernel needs from one parsed document."""
    namespaces: Dict[str, str] = field(default_factory=dict)
    operations: Dict[str, Operation] = field(default_factory=dict)
    types: Dict[Optional[str], Dict[str, RawTypeRecord]] = field(default_factory=dict)
    endpoint: Optional[str] = None
    namespace: Optional[str] = None
    element_form_default: str = ElementFormDefault.UNQUALIFIED.value
    service_name: Optional[str] = None


def _local(tag: str) -> str:
    """Local part of a Clark-notation tag: ``{uri}name`` -> ``name``."""
    return tag.rsplit("}", 1)[-1]


def _is_xsd(element: Element, local_name: str) -> bool:
    return element.tag == XS + local_name


def _children(element: Element, local_name: str) -> Iterator[Element]:
    """Direct children with the given local name, any namespace."""
    for child in element:
        if isinstance(child.tag, str) and _local(child.tag) == local_name:
            yield child


def _first_child(element: Element, local_name: str) -> Optional[Element]:
    return next(_children(element, local_name), None)


def _local_name(qname: Optional[str]) -> Optional[str]:
    if not qname:
        return None
    return split_qname(qname)[1]


def read_xml(text: str) -> Tuple[Element, List[Tuple[str, str]]]:
    """Parse XML text into its root element plus every namespace declaration in document order.

    Raises:
        DocumentParseError: If the text is not well-formed or uses forbidden constructs
    """
    root: Optional[Element] = None
    declarations: List[Tuple[str, str]] = []
    try:
        for event, payload in ET.iterparse(io.StringIO(text.lstrip()), events=("start-ns", "start")):
            if event == "start-ns":
                declarations.append(payload)
            elif root is None:
                root = payload
    except (ET.ParseError, DefusedXmlException) as e:
        raise DocumentParseError(f"Malformed document: {e}") from e

    if root is None:
        raise DocumentParseError("Malformed document: no root element")
    return root, declarations


class WsdlParser:
    """Single-use parser: construct with the root element, call parse() once."""

    def __init__(
        self,
        root: Element,
        declarations: List[Tuple[str, str]],
        base_path: Optional[str] = None,
        loader: Optional[SchemaLoader] = None,
        load_external_schemas: bool = True,
    ) -> None:
        self.root = root
        self.base_path = base_path
        self.loader = loader or read_document
        self.load_external_schemas = load_external_schemas
        self.result = ParsedDocument()
        self._visited: Set[str] = set()
        self._merge_namespaces(declarations)

    def parse(self) -> ParsedDocument:
        result = self.result
        result.namespace = self.root.get("targetNamespace")

        schemas = list(self.root.iter(XS + "schema"))
        if schemas:
            result.element_form_default = self._element_form_default(schemas[0])
        for schema in schemas:
            self._parse_schema(schema, schema.get("targetNamespace"), self.base_path)

        self._parse_service()
        self._parse_operations()

        logger.debug(
            "Parsed document: %d namespaces, %d operations, %d schema namespaces",
            len(result.namespaces), len(result.operations), len(result.types),
        )
        return result

    def _merge_namespaces(self, declarations: List[Tuple[str, str]]) -> None:
        # First declaration of a prefix wins
        for prefix, uri in declarations:
            self.result.namespaces.setdefault(prefix or DEFAULT_NAMESPACE_PREFIX, uri)

    @staticmethod
    def _element_form_default(schema: Element) -> str:
        value = schema.get("elementFormDefault", ElementFormDefault.UNQUALIFIED.value)
        if value not in ElementFormDefault.values():
            logger.warning("Ignoring unknown elementFormDefault %r", value)
            return ElementFormDefault.UNQUALIFIED.value
        return value

    # Schema types

    def _parse_schema(self, schema: Element, target_namespace: Optional[str], base: Optional[str]) -> None:
        for node in schema:
            if _is_xsd(node, "include"):
                self._load_external(node, target_namespace, base, is_import=False)
            elif _is_xsd(node, "import"):
                self._load_external(node, target_namespace, base, is_import=True)
            else:
                complex_type = self._declared_complex_type(node)
                name = node.get("name")
                if complex_type is not None and name:
                    types = self.result.types.setdefault(target_namespace, {})
                    types[name] = self._type_record(complex_type, name, target_namespace)

    @staticmethod
    def _declared_complex_type(node: Element) -> Optional[Element]:
        """The complexType a top-level node declares, if any.

        An element counts only with an inline complexType; ``<element type=...>``
        just names an existing type and must not shadow it.
        """
        if _is_xsd(node, "complexType"):
            return node
        if _is_xsd(node, "element"):
            return node.find(XS + "complexType")
        return None

    def _type_record(self, complex_type: Element, name: str, namespace: Optional[str]) -> RawTypeRecord:
        fields: Dict[str, RawFieldRecord] = {}
        order: List[str] = []
        base_type: Optional[str] = None

        def collect(container: Element) -> None:
            nonlocal base_type
            for child in container:
                if _is_xsd(child, "element"):
                    field_name = child.get("name") or _local_name(child.get("ref"))
                    if not field_name:
                        continue
                    if field_name not in fields:
                        order.append(field_name)
                    fields[field_name] = RawFieldRecord(
                        type=child.get("type") or child.get("ref"),
                        min_occurs=child.get("minOccurs"),
                        max_occurs=child.get("maxOccurs"),
                        nillable=child.get("nillable"),
                    )
                elif any(_is_xsd(child, group) for group in _GROUPS):
                    collect(child)
                elif any(_is_xsd(child, model) for model in _CONTENT_MODELS):
                    for derivation in child:
                        if any(_is_xsd(derivation, kind) for kind in _DERIVATIONS):
                            base_type = derivation.get("base")
                            collect(derivation)

        collect(complex_type)

        return RawTypeRecord(
            name=name,
            namespace=namespace,
            order=tuple(order),
            base_type=base_type,
            fields=fields,
        )

    def _load_external(
        self,
        node: Element,
        including_namespace: Optional[str],
        base: Optional[str],
        is_import: bool,
    ) -> None:
        location = node.get("schemaLocation")
        if not location:
            return
        if base is None or not self.load_external_schemas:
            logger.debug("Skipping external schema %s: no base path", location)
            return

        resolved = resolve_location(location, base)
        if resolved in self._visited:
            return
        self._visited.add(resolved)

        try:
            root, declarations = read_xml(self.loader(resolved))
        except (AcquisitionError, DocumentParseError) as e:
            logger.warning("Skipping external schema %s: %s", resolved, e)
            return

        schema = root if _is_xsd(root, "schema") else root.find(f".//{XS}schema")
        if schema is None:
            logger.warning("Skipping external schema %s: no schema element", resolved)
            return

        self._merge_namespaces(declarations)
        if is_import:
            namespace = schema.get("targetNamespace") or node.get("namespace")
        else:
            # An include without its own target namespace takes the includer's
            namespace = schema.get("targetNamespace") or including_namespace

        logger.debug("Loading external schema %s into %s", resolved, namespace)
        self._parse_schema(schema, namespace, resolved)

    # Service and operations

    def _parse_service(self) -> None:
        service = _first_child(self.root, "service")
        if service is None:
            return
        self.result.service_name = service.get("name")
        for port in _children(service, "port"):
            for address in _children(port, "address"):
                if address.get("location"):
                    self.result.endpoint = address.get("location")
                    return

    def _parse_operations(self) -> None:
        messages: Dict[str, Optional[str]] = {}
        for message in _children(self.root, "message"):
            part = _first_child(message, "part")
            if part is not None:
                messages[message.get("name")] = _local_name(part.get("element") or part.get("type"))

        port_operations: Dict[str, Tuple[Optional[str], Optional[str]]] = {}
        for port_type in _children(self.root, "portType"):
            for operation in _children(port_type, "operation"):
                port_operations.setdefault(
                    operation.get("name"),
                    (self._message_of(operation, "input"), self._message_of(operation, "output")),
                )

        for binding in _children(self.root, "binding"):
            for operation in _children(binding, "operation"):
                name = operation.get("name")
                if not name:
                    continue
                key = operation_key(name)
                if key in self.result.operations:
                    continue

                input_message, output_message = port_operations.get(name, (None, None))
                input_type = messages.get(input_message) or name
                output_type = messages.get(output_message) or name

                self.result.operations[key] = Operation(
                    name=name,
                    action=self._soap_action(operation),
                    input=input_type,
                    output=output_type,
                    parameters=self._parameters(input_type),
                )

    @staticmethod
    def _message_of(operation: Element, direction: str) -> Optional[str]:
        node = _first_child(operation, direction)
        if node is None:
            return None
        return _local_name(node.get("message"))

    @staticmethod
    def _soap_action(operation: Element) -> Optional[str]:
        # The SOAP extension element shares the local name "operation"
        soap_operation = _first_child(operation, "operation")
        if soap_operation is None:
            return None
        return soap_operation.get("soapAction")

    def _parameters(self, type_name: str) -> Dict[str, Dict[str, Optional[str]]]:
        # Same fallback as the operation binder: "Ping" may be declared as "PingType"
        for candidate in (type_name, type_name + TYPE_SUFFIX):
            for types in self.result.types.values():
                record = types.get(candidate)
                if record is not None:
                    return {
                        field_name: {"name": field_name, "type": record.fields[field_name].type}
                        for field_name in record.order
                    }
        return {}


def parse_document(
    text: str,
    base_path: Optional[str] = None,
    *,
    loader: Optional[SchemaLoader] = None,
    load_external_schemas: bool = True,
) -> ParsedDocument:
    """Parse WSDL text into a ParsedDocument.

    Args:
        text: Raw document text
        base_path: Path or URL that relative schemaLocation attributes resolve
            against; None disables external schema loading
        loader: Callable returning the text of a resolved schema location
        load_external_schemas: Set False to ignore xs:include/xs:import locations

    Raises:
        DocumentParseError: If the text is not well-formed XML
    """
    root, declarations = read_xml(text)
    parser = WsdlParser(
        root,
        declarations,
        base_path=base_path,
        loader=loader,
        load_external_schemas=load_external_schemas,
    )
    return parser.parse()
