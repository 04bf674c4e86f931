"""CLI entrypoints for webmap commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List

from .config import ConfigError
from .dispatcher import Dispatcher, is_error, render_json
from .logging import configure_logging


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webmap",
        description="Produce structured reports describing a web application source tree.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--project-path",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser(
        "list",
        help="List available tools, resources and prompts.",
    )
    _add_verbose_option(list_parser, suppress_default=True)

    run_parser = subparsers.add_parser(
        "run",
        help="Run a named analysis and print its report.",
    )
    _add_verbose_option(run_parser, suppress_default=True)
    run_parser.add_argument("operation", help="Analysis name, e.g. get_components.")
    run_parser.add_argument(
        "--metadata",
        action="store_true",
        help="Wrap the report with its root, file count and generation time.",
    )

    resource_parser = subparsers.add_parser(
        "resource",
        help="Read a project:// resource.",
    )
    _add_verbose_option(resource_parser, suppress_default=True)
    resource_parser.add_argument("uri", help="Resource URI, e.g. project://structure.")

    prompt_parser = subparsers.add_parser(
        "prompt",
        help="Render a prompt template.",
    )
    _add_verbose_option(prompt_parser, suppress_default=True)
    prompt_parser.add_argument("name", help="Prompt name, e.g. code_review.")
    prompt_parser.add_argument(
        "--arg",
        dest="arguments",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Prompt argument; may be repeated.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve tools, resources and prompts over HTTP.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8765, help="Port to listen on.")

    return parser


def _parse_arguments(values: List[str]) -> Dict[str, str]:
    arguments: Dict[str, str] = {}
    for value in values:
        key, sep, item = value.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected KEY=VALUE, got '{value}'")
        arguments[key.strip()] = item
    return arguments


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for webmap commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logger = configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        dispatcher = Dispatcher(args.project_path)
    except (ConfigError, ValueError) as exc:
        parser.exit(1, f"webmap: invalid configuration: {exc}\n")
    logger.debug("Project root resolved to %s", dispatcher.root)

    if args.command == "list":
        payload: object = {
            "tools": dispatcher.list_operations(),
            "resources": dispatcher.list_resources(),
            "prompts": dispatcher.list_prompts(),
        }
    elif args.command == "run":
        payload = dispatcher.run(args.operation, include_metadata=args.metadata)
    elif args.command == "resource":
        payload = dispatcher.read_resource(args.uri)
    elif args.command == "prompt":
        try:
            arguments = _parse_arguments(args.arguments)
        except ValueError as exc:
            parser.exit(2, f"{exc}\n")
        payload = dispatcher.get_prompt(args.name, arguments)
    elif args.command == "serve":  # pragma: no cover - integration path
        from .service import run_service

        logger.info("Serving %s on http://%s:%d", dispatcher.root, args.host, args.port)
        run_service(dispatcher, host=args.host, port=args.port)
        return
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")

    print(render_json(payload))
    if isinstance(payload, dict) and is_error(payload):
        sys.exit(1)


if __name__ == "__main__":
    main(sys.argv[1:])
