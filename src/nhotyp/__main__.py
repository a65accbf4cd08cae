"""
Nhotyp command line interpreter.

Usage:
    python -m nhotyp program.nh                 # run a program, scan reads stdin
    python -m nhotyp program.nh --input data    # scan reads from a file
    python -m nhotyp program.nh --check         # load and validate only
    python -m nhotyp                            # interactive session
"""

import argparse
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys
from types import TracebackType
from typing import List, TextIO

from nhotyp.nhotyp import Nhotyp
from nhotyp.nhotyp_call_stack import DEFAULT_MAX_CALL_DEPTH
from nhotyp.nhotyp_error import NhotypError
from nhotyp.nhotyp_io import NhotypStreamInput, NhotypStreamOutput


def setup_logging(verbose: bool, log_file: str | None) -> None:
    """Configure logging to stderr, or to a rotating file when one is given."""
    handlers: List[logging.Handler] = []
    if log_file:
        # Keep up to 5 backups, max 1MB each
        handlers.append(RotatingFileHandler(
            log_file,
            maxBytes=1024*1024,
            backupCount=5,
            encoding='utf-8'
        ))

    else:
        handlers.append(logging.StreamHandler(sys.stderr))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def install_global_exception_handler() -> None:
    """Install a global exception handler for uncaught exceptions."""
    logger = logging.getLogger('GlobalExceptionHandler')

    def handle_exception(exc_type: type[BaseException], exc_value: BaseException, exc_traceback: TracebackType | None) -> None:
        """Handle uncaught exceptions and log them."""
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return

        logger.critical(
            "Uncaught exception",
            exc_info=(exc_type, exc_value, exc_traceback)
        )

    sys.excepthook = handle_exception


def format_error(filename: str, error: NhotypError, detailed: bool = False) -> str:
    """
    Format an error as 'file:line: error: message' followed by the offending line.

    Args:
        filename: Name to report the error against
        error: The error
        detailed: Include the full detailed message

    Returns:
        Text ready to write to a stream
    """
    header = f"{filename}:{error.line if error.line is not None else 0}: error: "
    text = f"{header}{error.message}\n"

    source_line = error.source_line()
    if source_line:
        padding = " " * (len(header) - 2)
        text += f"{padding}> {source_line}\n"

    if detailed:
        text += f"{error}\n"

    return text


def run_file(interpreter: Nhotyp, args: argparse.Namespace, stdin: TextIO, stdout: TextIO, stderr: TextIO) -> int:
    """Load and run a program file, returning the process exit status."""
    try:
        source = Path(args.file).read_text(encoding='utf-8')

    except OSError:
        stderr.write(f"nhotyp: fatal error: {args.file}: cannot read file\n")
        return 1

    if args.check:
        error = interpreter.check(source)
        if error is not None:
            stderr.write(format_error(args.file, error, args.verbose))
            return 1

        return 0

    try:
        program = interpreter.load(source)
        output = NhotypStreamOutput(stdout)
        if args.input:
            with open(args.input, 'r', encoding='utf-8') as input_file:
                value = interpreter.run_program(program, NhotypStreamInput(input_file), output)

        else:
            value = interpreter.run_program(program, NhotypStreamInput(stdin), output)

    except NhotypError as e:
        stderr.write(format_error(args.file, e, args.verbose))
        return 1

    except OSError:
        stderr.write(f"nhotyp: fatal error: {args.input}: cannot read file\n")
        return 1

    return value & 0xFF


def run_interactive(interpreter: Nhotyp, stdin: TextIO, stdout: TextIO, verbose: bool = False) -> int:
    """Run an interactive session until end of input."""
    stdout.write("Nhotyp interactive session. Press Ctrl-D to exit.\n")

    session = interpreter.create_session(
        NhotypStreamInput(stdin, prompt="  > ", prompt_stream=stdout),
        NhotypStreamOutput(stdout)
    )

    while True:
        stdout.write("... " if session.is_pending() else ">>> ")
        stdout.flush()

        try:
            line = stdin.readline()
            if not line:
                break

            session.feed(line.rstrip('\n'))

        except KeyboardInterrupt:
            # Ctrl-C abandons any unfinished block
            session.reset_pending()
            stdout.write("\nKeyboardInterrupt\n")

        except NhotypError as e:
            stdout.write(format_error("stdin", e, verbose))

    stdout.write("\n")
    return 0


def positive_int(value: str) -> int:
    """Parse a command line integer that must be at least 1."""
    try:
        number = int(value)

    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from e

    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")

    return number


def create_parser() -> argparse.ArgumentParser:
    """Create the command line argument parser."""
    parser = argparse.ArgumentParser(
        prog="nhotyp",
        description="Run a Nhotyp program, or start an interactive session when no file is given"
    )
    parser.add_argument("file", nargs="?", help="Program file to run")
    parser.add_argument("--input", help="Read scan values from this file instead of stdin")
    parser.add_argument(
        "--max-depth",
        type=positive_int,
        default=DEFAULT_MAX_CALL_DEPTH,
        help=f"Maximum function call depth (default: {DEFAULT_MAX_CALL_DEPTH})"
    )
    parser.add_argument("--check", action="store_true", help="Load and validate the program without running it")
    parser.add_argument("--verbose", action="store_true", help="Show detailed errors and debug logging")
    parser.add_argument("--log-file", help="Write logs to this file instead of stderr")
    return parser


def main(argv: List[str] | None = None) -> int:
    """Main function to run the interpreter."""
    args = create_parser().parse_args(argv)

    setup_logging(args.verbose, args.log_file)
    install_global_exception_handler()

    interpreter = Nhotyp(max_call_depth=args.max_depth)

    if args.file is None:
        return run_interactive(interpreter, sys.stdin, sys.stdout, args.verbose)

    return run_file(interpreter, args, sys.stdin, sys.stdout, sys.stderr)


if __name__ == "__main__":
    sys.exit(main())
