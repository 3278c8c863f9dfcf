# SPDX-License-Identifier: MIT
"""Command-line interface for ccbuild."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from ccbuild.configure.config import DEFAULT_COMPILER, BuildOptions
from ccbuild.core import validator
from ccbuild.core.errors import CcbuildError
from ccbuild.core.project import Project
from ccbuild.util.commands import EXIT_FAILURE, make, spawn, temporary_makefile_name

# Set up logging
logger = logging.getLogger("ccbuild")

DEFAULT_MAKEFILE = "makefile"
DEPEND_SUFFIX = ".depend"

VERBOSITY_HELP = """\
Verbosity levels:
1. Show compile/run commands
2. Show all commands
3. Debug
"""


def setup_logging(verbose: int = 0) -> None:
    """Configure logging based on verbosity level."""
    if verbose >= 3:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif verbose >= 1:
        level = logging.INFO
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=fmt, force=True)


def options_from_args(args: argparse.Namespace) -> BuildOptions:
    return BuildOptions(
        compiler=args.compiler or "",
        macros=args.define or "",
        fuzz=getattr(args, "fuzz", False),
        optimize=args.optimize,
        sanitize=args.sanitize,
        time_execution=args.time_execution,
        verbose=args.verbose,
    )


def prepare_project(options: BuildOptions, sources: list[str]) -> Project:
    """Probe the compiler, register the applications and parse them.

    Raises:
        CcbuildError: On any failure, including when every application
            was ignored.
    """
    project = Project(options)
    project.setup_compiler_and_macros()

    for source in sources:
        project.add_application(source)

    if not len(project.applications):
        raise CcbuildError("no application source files to process")

    project.parse()
    return project


def remove_makefile(makefile: str, verbose: int) -> None:
    if verbose >= 3:
        logger.debug("Deleting: %s", makefile)
    os.remove(makefile)


def cmd_build(args: argparse.Namespace) -> int:
    """Build one or more applications.

    Generates a temporary makefile, builds everything from scratch and
    removes the object files and the makefile afterwards.
    """
    options = options_from_args(args)
    setup_logging(options.verbose)

    makefile = temporary_makefile_name()
    project = prepare_project(options, args.sources)
    project.generate(Path(makefile))

    try:
        make(makefile, "clean", options.verbose)
        status = make(makefile, "all", options.verbose)
        make(makefile, "clean-object-files", options.verbose)
    finally:
        remove_makefile(makefile, options.verbose)
    return status


def cmd_gen(args: argparse.Namespace) -> int:
    """Generate a makefile (and makefile.depend) for one or more applications."""
    options = options_from_args(args)
    setup_logging(options.verbose)

    makefile = args.makefile or DEFAULT_MAKEFILE
    if not validator.is_file_path(makefile):
        logger.error("Invalid makefile name: %s", makefile)
        return EXIT_FAILURE

    if os.path.lexists(makefile):
        logger.error("Makefile already exists: %s", makefile)
        return EXIT_FAILURE

    project = prepare_project(options, args.sources)
    project.generate(Path(makefile), Path(makefile + DEPEND_SUFFIX))
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    """Build and run a single application with optional arguments."""
    options = options_from_args(args)
    setup_logging(options.verbose)

    makefile = temporary_makefile_name()
    project = prepare_project(options, [args.source])
    project.generate(Path(makefile))

    program = "./" + args.source[: -len(".cc")]
    try:
        make(makefile, "clean", options.verbose)
        status = make(makefile, "all", options.verbose)
        if status == 0:
            if options.verbose >= 1:
                logger.info("%s%s", program, " ..." if args.arguments else "")
            status = spawn(program, args.arguments)
        make(makefile, "clean", options.verbose)
    finally:
        remove_makefile(makefile, options.verbose)
    return status


def cmd_runall(args: argparse.Namespace) -> int:
    """Build and run one or more applications."""
    options = options_from_args(args)
    setup_logging(options.verbose)

    makefile = temporary_makefile_name()
    project = prepare_project(options, args.sources)
    project.generate(Path(makefile))

    try:
        make(makefile, "clean", options.verbose)
        status = make(makefile, "run", options.verbose)
        make(makefile, "clean", options.verbose)
    finally:
        remove_makefile(makefile, options.verbose)
    return status


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add the options shared by every command."""
    parser.add_argument("-o", "--optimize", action="store_true", help="Optimize (-O2)")
    parser.add_argument(
        "-t",
        "--time-execution",
        action="store_true",
        help="Time command execution (implies verbose)",
    )
    parser.add_argument(
        "-s",
        "--sanitize",
        action="store_true",
        help="Enable sanitizers (Address & UndefinedBehavior)",
    )
    parser.add_argument(
        "-c",
        "--compiler",
        metavar="COMPILER",
        help=f"Compiler (default: {DEFAULT_COMPILER})",
    )
    parser.add_argument(
        "-d", "--define", metavar="MACRO[,...]", help="Define macro(s)"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (up to three times)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ccbuild",
        description="Generate makefiles from #include dependencies and build.",
        epilog="Run 'ccbuild <command> --help' for command-specific help.",
    )
    from ccbuild import __version__

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")
    formatter = argparse.RawDescriptionHelpFormatter

    # ccbuild build
    build_parser = subparsers.add_parser(
        "build",
        help="Build one or more applications",
        epilog=VERBOSITY_HELP,
        formatter_class=formatter,
    )
    add_common_args(build_parser)
    build_parser.add_argument("sources", nargs="+", metavar="app.cc")
    build_parser.set_defaults(func=cmd_build)

    # ccbuild gen
    gen_parser = subparsers.add_parser(
        "gen",
        help="Generate a makefile for one or more applications",
        epilog=VERBOSITY_HELP,
        formatter_class=formatter,
    )
    add_common_args(gen_parser)
    gen_parser.add_argument(
        "-f",
        "--makefile",
        metavar="FILE",
        help=f'Write to FILE instead of "{DEFAULT_MAKEFILE}"',
    )
    gen_parser.add_argument(
        "-z",
        "--fuzz",
        action="store_true",
        help="Build libFuzzer binary (implies sanitizers)",
    )
    gen_parser.add_argument("sources", nargs="+", metavar="app.cc")
    gen_parser.set_defaults(func=cmd_gen)

    # ccbuild run
    run_parser = subparsers.add_parser(
        "run",
        help="Build and run a single application with optional arguments",
        epilog=VERBOSITY_HELP,
        formatter_class=formatter,
    )
    add_common_args(run_parser)
    run_parser.add_argument("source", metavar="app.cc")
    run_parser.add_argument("arguments", nargs=argparse.REMAINDER)
    run_parser.set_defaults(func=cmd_run)

    # ccbuild runall
    runall_parser = subparsers.add_parser(
        "runall",
        help="Build and run one or more applications",
        epilog=VERBOSITY_HELP,
        formatter_class=formatter,
    )
    add_common_args(runall_parser)
    runall_parser.add_argument("sources", nargs="+", metavar="app.cc")
    runall_parser.set_defaults(func=cmd_runall)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the ccbuild CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help(sys.stderr)
        return EXIT_FAILURE

    try:
        result: int = args.func(args)
    except CcbuildError as e:
        logger.error("%s", e)
        return EXIT_FAILURE
    return result


if __name__ == "__main__":
    sys.exit(main())
