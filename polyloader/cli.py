"""CLI entrypoints for polyloader commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterable

from .config import ConfigError, PolyloaderConfig, load_config
from .constants import DEFAULT_POLYFILLS_DIR, RESOURCE_MODULE
from .injector import PolyfillsInjector
from .loader.generator import shim_file_path
from .logging import configure_logging, get_logger
from .models import GeneratedFile, ResourceKinds
from .shims.resolver import ShimResolver
from .shims.sources import ShimSourceLoader


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
        help="Also write log records to this file.",
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Path to .polyloader.yml or the directory holding it.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="polyloader",
        description="Inject a feature-detecting polyfills loader into HTML documents.",
    )
    _add_verbose_option(parser)
    _add_log_file_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    inject_parser = subparsers.add_parser(
        "inject",
        help="Replace the scripts of an HTML document with a polyfills loader.",
    )
    _add_verbose_option(inject_parser, suppress_default=True)
    _add_log_file_option(inject_parser, suppress_default=True)
    _add_config_option(inject_parser)
    inject_parser.add_argument("document", help="Path to the HTML document to transform.")
    inject_parser.add_argument(
        "--out-dir",
        default=None,
        help="Directory receiving the document and generated files (defaults to <document dir>/dist).",
    )
    inject_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the transformed document and generated file names without writing.",
    )

    shims_parser = subparsers.add_parser(
        "shims",
        help="List the polyfills the configuration resolves to.",
    )
    _add_verbose_option(shims_parser, suppress_default=True)
    _add_log_file_option(shims_parser, suppress_default=True)
    _add_config_option(shims_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for polyloader commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file).expanduser() if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    if args.command == "inject":
        try:
            _run_inject(args)
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except ConfigError as exc:
            parser.exit(1, f"polyloader inject failed: {exc}\n")
    elif args.command == "shims":
        try:
            _run_shims(args)
        except ConfigError as exc:
            parser.exit(1, f"polyloader shims failed: {exc}\n")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_inject(args: argparse.Namespace) -> None:
    logger = get_logger("cli")
    document = Path(args.document).expanduser().resolve()
    if not document.is_file():
        raise FileNotFoundError(f"Document not found: {args.document}")

    config = load_config(Path(args.config) if args.config else document.parent)
    injector = PolyfillsInjector(resolver=_build_resolver(config))
    result = injector.inject(document.read_text(encoding="utf-8"), config.injection)

    if args.dry_run:
        print(result.html)
        for generated in result.generated_files:
            print(f"would write {generated.path} ({generated.kind})")
        return

    out_dir = Path(args.out_dir).expanduser() if args.out_dir else document.parent / "dist"
    out_dir = out_dir.resolve()
    out_dir.mkdir(parents=True, exist_ok=True)
    (out_dir / document.name).write_text(result.html, encoding="utf-8")
    written = write_generated_files(out_dir, result.generated_files)
    logger.info("Wrote %s and %d generated files to %s", document.name, len(written), out_dir)


def _run_shims(args: argparse.Namespace) -> None:
    config = load_config(Path(args.config) if args.config else Path.cwd())
    injection = config.injection
    default_kind = injection.module_kind or RESOURCE_MODULE
    kinds = ResourceKinds(
        default=frozenset([default_kind, *(r.kind for r in injection.extra_resources)]),
        legacy=frozenset(
            kind
            for branch in injection.legacy
            for kind in (branch.module_kind, *(r.kind for r in branch.extra_resources))
        ),
    )
    shims = _build_resolver(config).resolve(injection.polyfills, kinds)
    if not shims:
        print("No polyfills configured")
        return
    for shim in shims:
        path = shim_file_path(shim, DEFAULT_POLYFILLS_DIR)
        print(f"{shim.name}\t{path}\t{shim.test or '(always)'}")


def _build_resolver(config: PolyloaderConfig) -> ShimResolver:
    return ShimResolver(ShimSourceLoader.from_root(config.root, config.node_modules))


def write_generated_files(out_dir: Path, files: Iterable[GeneratedFile]) -> list[Path]:
    """Write each generated file below ``out_dir``, refusing paths that escape it."""
    root = out_dir.resolve()
    written: list[Path] = []
    for generated in files:
        # Inline script names may carry a query string for dev servers.
        relative = generated.path.split("?", 1)[0].lstrip("/")
        target = (root / relative).resolve()
        if root != target and root not in target.parents:
            raise ConfigError(f"Generated file {generated.path} would be written outside {root}")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(generated.content, encoding="utf-8")
        written.append(target)
    return written


if __name__ == "__main__":
    main(sys.argv[1:])
