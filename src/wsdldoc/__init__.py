"""wsdldoc: queryable WSDL documents with deterministic type resolution."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("wsdldoc")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
from wsdldoc.api import Document
from wsdldoc.codes import ElementFormDefault
from wsdldoc.contracts import AcquisitionOptions, CacheInfo
from wsdldoc.errors import AcquisitionError, ConfigurationError, DocumentParseError, WsdlDocError
from wsdldoc.kernel.records import FieldDescriptor, Operation, TypeDefinition

__all__ = [
    "__version__",
    "Document",
    "TypeDefinition",
    "FieldDescriptor",
    "Operation",
    "ElementFormDefault",
    "AcquisitionOptions",
    "CacheInfo",
    "WsdlDocError",
    "ConfigurationError",
    "AcquisitionError",
    "DocumentParseError",
]
