"""Classification of namespace prefixes as user-defined or standard.

This is a string-prefix heuristic, not a registry of standards bodies. A
standards namespace whose URI does not start with one of the prefixes below
is reported as user-defined.
"""

from collections.abc import Mapping
from typing import Optional, Tuple

STANDARD_NAMESPACE_PREFIXES: Tuple[str, ...] = (
    "http://schemas.xmlsoap.org",  # SOAP 1.1, WSDL 1.1
    "http://www.w3.org",  # XML Schema, SOAP 1.2, XML
)


def is_standard_uri(uri: Optional[str]) -> bool:
    """True when ``uri`` belongs to a known standards namespace."""
    return uri is not None and uri.startswith(STANDARD_NAMESPACE_PREFIXES)


def is_user_defined(namespaces: Mapping[str, str], prefix: Optional[str]) -> bool:
    """True unless ``prefix`` maps to a standards namespace.

    Unknown prefixes, and None for an unprefixed type reference, count as
    user-defined.
    """
    if prefix is None:
        return True
    return not is_standard_uri(namespaces.get(prefix))


def split_qname(qname: str) -> Tuple[Optional[str], str]:
    """Split ``prefix:local`` into (prefix, local); the prefix is None when absent."""
    if ":" in qname:
        prefix, local = qname.split(":", 1)
        return prefix, local
    return None, qname
