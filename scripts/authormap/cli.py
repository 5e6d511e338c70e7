"""CLI entry point: scan, collections."""

from __future__ import annotations

import argparse
import logging
import sys

from scripts.authormap.config import load_config
from scripts.authormap.logging_config import configure_logging
from scripts.authormap.mapping import build_author_mapping
from scripts.authormap.output import print_detected_users, write_author_file
from scripts.authormap.providers.azure_devops import AzureDevOpsClient
from scripts.authormap.walker import HierarchyWalker

logger = logging.getLogger("authormap.cli")


def _connect(args: argparse.Namespace):
    config = load_config(
        server_url=args.server,
        authors_file=getattr(args, "output", None),
    )
    configure_logging(args.log_level or config.log_level)
    client = AzureDevOpsClient(config.server)
    client.authenticate()
    return config, client


def cmd_scan(args: argparse.Namespace) -> None:
    """Scan the whole server and write the author file."""
    config, client = _connect(args)

    result = HierarchyWalker(client).scan()
    lines = build_author_mapping(result.identities)
    if result.failures:
        logger.warning(
            "%d of %d projects were skipped",
            len(result.failures),
            result.projects_scanned,
        )

    if not args.quiet:
        print_detected_users(lines, sys.stdout)

    path = write_author_file(lines, config.output.authors_file)
    print(f"Check {path} for a copy of the result.")


def cmd_collections(args: argparse.Namespace) -> None:
    """List collections and their projects."""
    _, client = _connect(args)

    for collection in client.list_project_collections():
        print(collection.name)
        for project in client.list_projects(collection):
            print(f"  {project.name}")


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    configure_logging()

    # Options shared by every subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--server", "-s",
        help="Server root URL, e.g. http://tfs:8080/tfs (default: $ADO_SERVER_URL)",
    )
    common.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: $LOG_LEVEL or INFO)",
    )

    parser = argparse.ArgumentParser(
        prog="authormap",
        description="Generate a git-tfs author file from an Azure DevOps Server",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # scan command
    scan_parser = subparsers.add_parser(
        "scan",
        parents=[common],
        help="Scan all collections and write the author file",
    )
    scan_parser.add_argument(
        "--output", "-o",
        help="Author file path (default: $AUTHORS_FILE or Authors.txt)",
    )
    scan_parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Do not print the detected users",
    )
    scan_parser.set_defaults(func=cmd_scan)

    # collections command
    coll_parser = subparsers.add_parser(
        "collections",
        parents=[common],
        help="List collections and projects",
    )
    coll_parser.set_defaults(func=cmd_collections)

    args = parser.parse_args(argv)
    args.func(args)
