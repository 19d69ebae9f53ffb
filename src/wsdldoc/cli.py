"""wsdldoc CLI: query operations and resolved types of a WSDL document."""

import argparse
import logging
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from typing import Any


def _build_document(args):
    from .api import Document
    from .contracts import AcquisitionOptions

    kwargs = {"options": AcquisitionOptions(timeout=args.timeout)}
    if args.base_path is not None:
        kwargs["base_path"] = args.base_path
    elif args.no_external:
        kwargs["base_path"] = None
    return Document(args.document, **kwargs)


def _emit(payload: Any, quiet: bool) -> None:
    from ._internal.canonical_json import canonical_dumps

    if not quiet:
        print(canonical_dumps(payload))


def _not_found(message: str) -> None:
    print(f"Not found: {message}", file=sys.stderr)
    sys.exit(1)


def main():
    """Main CLI entry point for wsdldoc commands."""
    try:
        wsdldoc_version = get_version("wsdldoc")
    except PackageNotFoundError:
        wsdldoc_version = "dev"

    parser = argparse.ArgumentParser(
        prog="wsdldoc",
        description="wsdldoc: query operations and resolved schema types of a WSDL document"
    )
    parser.add_argument("--version", action="version", version=f"wsdldoc {wsdldoc_version}")
    # Common arguments
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "document",
        help="WSDL document: file path, http(s) URL, or literal XML text"
    )
    parent_parser.add_argument(
        "--base-path",
        default=None,
        help="Path or URL that relative schemaLocation attributes resolve against"
    )
    parent_parser.add_argument(
        "--no-external",
        action="store_true",
        help="Do not load xs:include/xs:import schema locations"
    )
    parent_parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="HTTP timeout in seconds for URL documents and schemas"
    )
    parent_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress all non-error output."
    )
    parent_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log resolution and acquisition details to stderr."
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "operations",
        help="List operations with their SOAP action and input/output type names",
        parents=[parent_parser]
    )

    type_parser = subparsers.add_parser(
        "type",
        help="Show the resolved definition of a type name",
        parents=[parent_parser]
    )
    type_parser.add_argument("name", help="Type name, optionally prefix-qualified (ns1:Address)")

    operation_parser = subparsers.add_parser(
        "operation",
        help="Show the resolved input (or output) type of an operation",
        parents=[parent_parser]
    )
    operation_parser.add_argument("operation", help="Operation key (create_user) or name (CreateUser)")
    operation_parser.add_argument(
        "--output",
        action="store_true",
        help="Show the output type instead of the input type"
    )

    subparsers.add_parser(
        "types",
        help="List type namespaces and user-defined type references",
        parents=[parent_parser]
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    from .errors import WsdlDocError

    try:
        document = _build_document(args)

        if args.command == "operations":
            payload = {
                key: operation.model_dump(exclude={"parameters"})
                for key, operation in document.operations.items()
            }
            _emit(payload, args.quiet)
        elif args.command == "type":
            definition = document.type_definition(args.name)
            if definition is None:
                _not_found(f"type '{args.name}'")
            _emit(definition.model_dump(), args.quiet)
        elif args.command == "operation":
            if args.output:
                definition = document.operation_output_type(args.operation)
            else:
                definition = document.operation_input_type(args.operation)
            if definition is None:
                direction = "output" if args.output else "input"
                _not_found(f"{direction} type of operation '{args.operation}'")
            _emit(definition.model_dump(), args.quiet)
        elif args.command == "types":
            payload = {
                "type_namespaces": [
                    {"path": list(path), "namespace": namespace}
                    for path, namespace in document.type_namespaces()
                ],
                "type_definitions": [
                    {"path": list(path), "type": tag}
                    for path, tag in document.type_definitions()
                ],
            }
            _emit(payload, args.quiet)
    except WsdlDocError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
