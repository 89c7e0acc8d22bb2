"""CLI entrypoints for patternlibrary commands."""

from __future__ import annotations

import argparse
from pathlib import Path

from .config import load_config
from .errors import PatternLibraryError
from .logging import configure_logging
from .pipeline import PatternLibrary


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


def _add_log_file_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--log-file",
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also append log records to this file.",
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-c",
        "--config",
        default=".",
        help="Path to .patternlibrary.yml or the directory containing it (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="patternlibrary",
        description="Build a browsable documentation site for a UI pattern library.",
    )
    _add_verbose_option(parser)
    _add_log_file_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Scan patterns, run adapters and write the library pages.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    _add_log_file_option(build_parser, suppress_default=True)
    _add_config_option(build_parser)
    build_parser.add_argument(
        "--dest",
        help="Override the destination directory.",
    )
    build_parser.add_argument(
        "--incremental",
        action="store_true",
        help="Keep previously registered patterns instead of starting from scratch.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the preview service exposing the registry snapshots.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_log_file_option(serve_parser, suppress_default=True)
    _add_config_option(serve_parser)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for patternlibrary commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    config_path = Path(args.config)

    if args.command == "build":
        overrides = {"dest": args.dest} if args.dest else None
        if args.verbose:
            overrides = {**(overrides or {}), "verbose": True}
        try:
            library = PatternLibrary.from_file(config_path, overrides)
            configure_logging(verbose=library.config.verbose, log_file=args.log_file)
            result = library.run(incremental=bool(args.incremental))
        except PatternLibraryError as exc:
            parser.exit(1, f"patternlibrary build failed: {exc}\nRun with --verbose for more details.\n")
        print(
            f"Built {len(result.patterns)} pattern doc(s) and {len(result.pages)} page(s) "
            f"into {_relativize(library.config.base_dest)}"
        )
    elif args.command == "serve":
        from .service.app import run_service

        try:
            config = load_config(config_path)
        except PatternLibraryError as exc:
            parser.exit(1, f"patternlibrary serve failed: {exc}\n")
        configure_logging(verbose=bool(args.verbose) or config.verbose, log_file=args.log_file)
        run_service(config_path, host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":  # pragma: no cover
    main()
