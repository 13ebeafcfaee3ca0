import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from native_launchers.codegen import SourceGenerator
from native_launchers.compile import BuildOrchestrator
from native_launchers.data import BuildFile, load_build_file, parse_build_file
from native_launchers.errors import LauncherError
from native_launchers.logging import configure_logging
from native_launchers.platforms import Platform

logger = logging.getLogger("native_launchers.cli")


def _load(args: argparse.Namespace) -> BuildFile:
    """Load the build file and apply command line overrides."""
    build_file = load_build_file(args.config)
    overrides = {}
    if args.debug:
        overrides["debug"] = True
    if args.output_dir is not None:
        overrides["output_directory"] = args.output_dir.absolute()
    if getattr(args, "timeout", None) is not None:
        overrides["timeout"] = args.timeout
    if getattr(args, "jobs", None) is not None:
        overrides["jobs"] = args.jobs
    if getattr(args, "compiler", None):
        overrides["compiler"] = args.compiler
    if not overrides:
        return build_file
    return parse_build_file({**build_file.model_dump(), **overrides})


def build(args: argparse.Namespace) -> None:
    """Generate sources and compile every launcher of the build file."""
    build_file = _load(args)
    orchestrator = BuildOrchestrator(build_file.to_config(), platform=args.platform)
    orchestrator.build(build_file.launchers)


def gen_sources(args: argparse.Namespace) -> None:
    """Generate the C sources and Java entry points without compiling."""
    build_file = _load(args)
    if build_file.skip:
        logger.info("Skipping native launcher generation (parameter skip is true)")
        return
    generator = SourceGenerator(build_file.to_config(), args.platform)
    sources = generator.generate_c_sources(build_file.launchers)
    generator.generate_entry_points(build_file.launchers)
    print(f"Generated {len(sources.launcher_sources)} launcher sources in {sources.source_directory}")


def gen_config(args: argparse.Namespace) -> None:
    """Generate the JNI configuration consumed by the native image compiler."""
    build_file = _load(args)
    if build_file.skip:
        logger.info("Skipping native launcher generation (parameter skip is true)")
        return
    generator = SourceGenerator(build_file.to_config(), args.platform)
    path = generator.generate_jni_config(build_file.launchers)
    print(f"Generated JNI configuration in {path}")


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", type=Path, required=True, help="Path to the JSON build file."
    )
    parser.add_argument("--output-dir", type=Path, help="Override the default output directory.")
    parser.add_argument(
        "--debug", action="store_true", help="Build with debug printouts and verbose logging."
    )
    parser.add_argument(
        "--platform",
        type=Platform,
        choices=list(Platform),
        default=Platform.current(),
        help="Target platform. Defaults to the host platform.",
    )


def cli(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Native launchers for GraalVM native images",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR.")

    command_subparsers = parser.add_subparsers(
        dest="command", required=True, help="Primary commands"
    )

    build_parser = command_subparsers.add_parser(
        "build", help="Generate and compile all launchers."
    )
    _add_common_arguments(build_parser)
    build_parser.add_argument("--timeout", type=float, help="Timeout in seconds per process.")
    build_parser.add_argument("--jobs", type=int, help="Number of launchers compiled at once.")
    build_parser.add_argument(
        "--compiler", nargs="+", help="Explicit compiler command, e.g. --compiler zig cc."
    )
    build_parser.set_defaults(func=build)

    sources_parser = command_subparsers.add_parser(
        "gen-sources", help="Generate launcher sources and entry points without compiling."
    )
    _add_common_arguments(sources_parser)
    sources_parser.set_defaults(func=gen_sources)

    config_parser = command_subparsers.add_parser(
        "gen-config", help="Generate the JNI configuration for the native image compiler."
    )
    _add_common_arguments(config_parser)
    config_parser.set_defaults(func=gen_config)

    args = parser.parse_args(argv)
    level = args.log_level or ("DEBUG" if getattr(args, "debug", False) else None)
    configure_logging(level)

    try:
        args.func(args)
    except LauncherError as e:
        logger.error("%s", e)
        return 1
    return 0


def main() -> None:
    sys.exit(cli())
