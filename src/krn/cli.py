#!/usr/bin/env python3
"""
KRN - command-line interface for Kopexa Resource Names.

Commands:
- parse: Parse a KRN and print its components
- validate: Check one or more KRNs
- safe-id: Convert text into a valid resource ID
- build: Assemble a KRN from service/resources/version
- parent: Print the parent of a KRN
- child: Print a child of a KRN

Usage:
    krn parse //catalog.kopexa.com/frameworks/iso27001@v1
    krn parse //kopexa.com/frameworks/iso27001 --format json
    krn validate //kopexa.com/frameworks/iso27001 //google.com/x/y
    krn safe-id "ISO 27001:2022"
    krn build --service catalog --resource frameworks=iso27001 --version v1
    krn parent //kopexa.com/frameworks/iso27001/controls/5.1.1
    krn child //kopexa.com/frameworks/iso27001 controls 5.1.1
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import yaml

from krn.builder import krn
from krn.errors import KRNError
from krn.name import KRN
from krn.utils.config import OUTPUT_FORMATS, find_project_root, get_cli_config
from krn.validation import safe_resource_id

logger = logging.getLogger(__name__)


def _parse_resource_arg(value: str) -> Tuple[str, str]:
    """argparse type for COLLECTION=ID pairs."""
    collection, sep, resource_id = value.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(
            f"expected COLLECTION=ID, got {value!r}"
        )
    return collection, resource_id


class KRNCommand:
    """
    CLI command handler for KRN operations.

    Every method returns a process exit code.
    """

    def __init__(self, repo_root: Optional[Path] = None):
        self.repo_root = repo_root or find_project_root()
        self.config = get_cli_config(self.repo_root)

    def _error(self, exc: KRNError) -> int:
        print(f"Error [{exc.code.value}]: {exc}", file=sys.stderr)
        return 1

    def _dump(self, data, output_format: Optional[str]) -> str:
        output_format = output_format or self.config["format"]
        if output_format == "json":
            return json.dumps(data, indent=2)
        return yaml.dump(data, default_flow_style=False, sort_keys=False).rstrip("\n")

    def parse(self, name: str, output_format: Optional[str] = None) -> int:
        """Print the components of a KRN."""
        try:
            parsed = KRN.parse(name)
        except KRNError as e:
            return self._error(e)

        print(self._dump(parsed.to_dict(), output_format))
        return 0

    def validate(self, names: List[str]) -> int:
        """Print one line per KRN; exit 1 if any is invalid."""
        exit_code = 0
        for name in names:
            try:
                KRN.parse(name)
                print(f"✓ {name}")
            except KRNError as e:
                print(f"✗ {name} ({e.code.value}: {e})")
                exit_code = 1
        return exit_code

    def safe_id(self, text: str) -> int:
        """Print text converted to a resource ID."""
        result = safe_resource_id(text)
        if not result:
            print(f"Error: no usable characters in {text!r}", file=sys.stderr)
            return 1
        print(result)
        return 0

    def build(
        self,
        resources: List[Tuple[str, str]],
        service: Optional[str] = None,
        version: Optional[str] = None,
    ) -> int:
        """Assemble and print a KRN."""
        builder = krn()
        if service:
            builder.service(service)
        for collection, resource_id in resources:
            builder.resource(collection, resource_id)
        if version:
            builder.version(version)

        try:
            built = builder.build()
        except KRNError as e:
            return self._error(e)

        print(built)
        return 0

    def parent(self, name: str) -> int:
        """Print the parent KRN."""
        try:
            parsed = KRN.parse(name)
        except KRNError as e:
            return self._error(e)

        parent = parsed.parent()
        if parent is None:
            print(f"Error: {name} is a root resource and has no parent", file=sys.stderr)
            return 1
        print(parent)
        return 0

    def child(self, name: str, collection: str, resource_id: str) -> int:
        """Print a child KRN."""
        try:
            print(KRN.parse(name).child(collection, resource_id))
        except KRNError as e:
            return self._error(e)
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="krn",
        description="Parse, validate and build Kopexa Resource Names",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s parse //catalog.kopexa.com/frameworks/iso27001@v1
  %(prog)s parse //kopexa.com/frameworks/iso27001 --format json
  %(prog)s validate //kopexa.com/frameworks/iso27001 //google.com/x/y
  %(prog)s safe-id "ISO 27001:2022"
  %(prog)s build --service catalog --resource frameworks=iso27001 --version v1
  %(prog)s parent //kopexa.com/frameworks/iso27001/controls/5.1.1
  %(prog)s child //kopexa.com/frameworks/iso27001 controls 5.1.1

KRN format:
  //[{service}.]kopexa.com/{collection}/{resource-id}[/{collection}/{resource-id}]...[@{version}]
        """
    )
    parser.add_argument(
        "--repo",
        type=str,
        help="Project root holding .krn/config.yaml (default: auto-detect)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # ----- krn parse -----
    parse_parser = subparsers.add_parser("parse", help="Parse a KRN")
    parse_parser.add_argument("name", help="KRN to parse")
    parse_parser.add_argument(
        "--format", "-f",
        dest="output_format",
        choices=list(OUTPUT_FORMATS),
        help="Output format (default: from config, else yaml)"
    )

    # ----- krn validate -----
    validate_parser = subparsers.add_parser("validate", help="Validate KRNs")
    validate_parser.add_argument("names", nargs="+", help="KRNs to validate")

    # ----- krn safe-id -----
    safe_id_parser = subparsers.add_parser(
        "safe-id",
        help="Convert text into a valid resource ID"
    )
    safe_id_parser.add_argument("text", help="Text to convert")

    # ----- krn build -----
    build_cmd_parser = subparsers.add_parser("build", help="Build a KRN")
    build_cmd_parser.add_argument("--service", "-s", help="Service label")
    build_cmd_parser.add_argument(
        "--resource", "-r",
        dest="resources",
        action="append",
        type=_parse_resource_arg,
        default=[],
        metavar="COLLECTION=ID",
        help="Resource pair, repeat for nesting (outermost first)"
    )
    build_cmd_parser.add_argument("--version", "-V", help="Version tag")

    # ----- krn parent -----
    parent_parser = subparsers.add_parser("parent", help="Print parent KRN")
    parent_parser.add_argument("name", help="KRN")

    # ----- krn child -----
    child_parser = subparsers.add_parser("child", help="Print child KRN")
    child_parser.add_argument("name", help="KRN")
    child_parser.add_argument("collection", help="Child collection")
    child_parser.add_argument("resource_id", help="Child resource ID")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    repo_path = Path(args.repo) if args.repo else None
    cmd = KRNCommand(repo_root=repo_path)
    logger.debug("Project root: %s", cmd.repo_root)

    if args.command == "parse":
        return cmd.parse(args.name, output_format=args.output_format)
    elif args.command == "validate":
        return cmd.validate(args.names)
    elif args.command == "safe-id":
        return cmd.safe_id(args.text)
    elif args.command == "build":
        return cmd.build(
            resources=args.resources,
            service=args.service,
            version=args.version,
        )
    elif args.command == "parent":
        return cmd.parent(args.name)
    elif args.command == "child":
        return cmd.child(args.name, args.collection, args.resource_id)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
