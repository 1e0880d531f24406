# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Command-line interface for WGSL import resolution.

Commands:
- resolve: print the import order and aliases of one or more entry points
- watch: resolve, then re-resolve whenever a dependent shader changes

This layer only parses arguments and formats results; all resolution logic
lives in ImportResolutionService.
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, TextIO, Union

from . import __version__
from .config import Config, ConfigurationError
from .errors import ImportResolutionError, InvariantViolation
from .logging_setup import resolve_level, setup_logging
from .service import ImportResolutionService, ResolvedImports
from .watcher import ImportGraphWatcher, PassResult

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_RESOLUTION_ERROR = 1
EXIT_USAGE_ERROR = 2


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="wgsl-imports",
        description="Resolve WGSL import graphs into a composition order and unique aliases",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "entries",
        nargs="*",
        help="Entry files relative to the project root. Default: entry_points from the config",
    )
    common.add_argument(
        "--project-root",
        type=Path,
        default=Path.cwd(),
        help="Base directory for project-root-relative imports. Default: current directory",
    )
    common.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Configuration file. Default: <project-root>/.wgsl_imports.yml",
    )
    common.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Write structured JSON logs to this directory",
    )
    common.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug output to stderr"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve_parser = subparsers.add_parser(
        "resolve", parents=[common], help="Print import order and aliases"
    )
    resolve_parser.add_argument(
        "--json", action="store_true", help="Print a JSON export instead of text"
    )

    subparsers.add_parser(
        "watch", parents=[common], help="Re-resolve entry points when their files change"
    )

    return parser.parse_args(argv)


def configure_logging(args: argparse.Namespace, config: Config) -> None:
    level = logging.DEBUG if args.verbose else resolve_level(config.log_level)
    if args.log_dir is not None:
        setup_logging(log_dir=args.log_dir, log_level=level, console_output=True)
    else:
        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            stream=sys.stderr,
        )


def format_text(resolved: ResolvedImports) -> str:
    """Render a pass as `<alias>\\t<relative path>` lines in import order."""
    names = resolved.names()
    lines = [f"{resolved.entry}:"]
    for module, relative in zip(resolved.modules(), resolved.relative_dependents()):
        lines.append(f"  {names[module]}\t{relative}")
    return "\n".join(lines)


def print_result(entry: str, result: PassResult, out: TextIO, err: TextIO) -> None:
    if isinstance(result, (ImportResolutionError, InvariantViolation)):
        print(f"error: {entry}: {result}", file=err)
    else:
        print(format_text(result), file=out)


def run_resolve(
    service: ImportResolutionService,
    entries: List[str],
    as_json: bool,
    out: TextIO,
    err: TextIO,
) -> int:
    """Resolve every entry point and print the results.

    Returns:
        Exit code: 0 if every entry resolved, 1 otherwise.
    """
    exit_code = EXIT_OK
    exports: Dict[str, Any] = {}
    for entry in entries:
        result: Union[ResolvedImports, ImportResolutionError]
        try:
            result = service.resolve(entry)
        except ImportResolutionError as e:
            result = e
            exit_code = EXIT_RESOLUTION_ERROR

        if as_json:
            exports[entry] = (
                {"error": result.to_dict()}
                if isinstance(result, ImportResolutionError)
                else result.to_dict()
            )
        else:
            print_result(entry, result, out, err)

    if as_json:
        indent = service.config.export_indent or None
        print(json.dumps(exports, indent=indent), file=out)

    return exit_code


def run_watch(service: ImportResolutionService, entries: List[str], out: TextIO, err: TextIO) -> int:
    """Resolve entry points and keep re-resolving them until interrupted.

    Returns:
        Exit code: 0 after Ctrl-C, 1 if the observer stopped on its own.
    """
    watcher = ImportGraphWatcher(service, entries)
    watcher.register_callback(lambda entry, result: print_result(entry, result, out, err))
    watcher.resolve_all()
    watcher.start()
    try:
        while watcher.is_running():
            time.sleep(0.5)
    except KeyboardInterrupt:
        return EXIT_OK
    finally:
        watcher.stop()

    logger.error("File observer stopped unexpectedly, no longer watching")
    print("error: file observer stopped unexpectedly", file=err)
    return EXIT_RESOLUTION_ERROR


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the `wgsl-imports` command."""
    args = parse_args(argv)

    project_root = args.project_root.resolve()
    try:
        if args.config is not None:
            config = Config(config_path=args.config, required=True)
        else:
            config = Config.for_project(project_root)
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    configure_logging(args, config)

    entries = list(args.entries) or config.entry_points
    if not entries:
        print("error: no entry points given and none configured", file=sys.stderr)
        return EXIT_USAGE_ERROR

    service = ImportResolutionService(project_root, config=config)
    if args.command == "watch":
        return run_watch(service, entries, sys.stdout, sys.stderr)
    return run_resolve(service, entries, args.json, sys.stdout, sys.stderr)


if __name__ == "__main__":
    sys.exit(main())
