"""Exception types raised by wsdldoc.

Resolution misses are never errors; every query that resolves a type or an
operation returns None instead. The classes below cover programmer errors and
documents that cannot be read at all.
"""


class WsdlDocError(Exception):
    """Base class for all wsdldoc errors."""
    pass


class ConfigurationError(WsdlDocError, ValueError):
    """Raised when a document is queried without a source, or configured with an invalid value."""
    pass


class AcquisitionError(WsdlDocError):
    """Raised when the top-level document cannot be read or fetched."""
    pass


class DocumentParseError(WsdlDocError, ValueError):
    """Raised when document text is not well-formed XML."""
    pass
