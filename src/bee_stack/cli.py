#!/usr/bin/env python3
"""
bee-stack CLI entry point.

Resolves the container runtime, then runs one lifecycle command against the
stack in the working directory. This is the only place where errors are
turned into messages and exit codes:

    0    success
    1    user declined a destructive action, runtime missing, unknown command
    2    compose/runtime version or connectivity failure
    3    stack unconfigured and user declined setup
    130  interrupted
"""

from __future__ import annotations

import argparse
import logging
import os
from importlib.metadata import PackageNotFoundError, version as package_version
from pathlib import Path
from typing import Callable, Dict, Optional

from .config_constants import ENV_FILE
from .console import configure_logging, print_error, print_install_help
from .diagnostics import dump_logs
from .env_file import discard_staged_env
from .errors import BeeStackError, UnknownCommand
from .prompts import Prompter
from .runtime import resolve_runtime
from .stack import Stack, check_installation

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = 'setup'

COMMANDS: Dict[str, Callable[[Stack], object]] = {
    'setup': lambda stack: stack.setup(),
    'start': lambda stack: stack.start(),
    'start:infra': lambda stack: stack.start_infra(),
    'stop': lambda stack: stack.stop(),
    'clean': lambda stack: stack.clean(),
    'logs': lambda stack: dump_logs(stack.root, stack.runner),
}


def get_cli_version() -> str:
    try:
        return package_version("bee-stack")
    except PackageNotFoundError:
        from . import __version__

        return __version__


def parse_arguments(argv: Optional[list] = None) -> argparse.Namespace:
    """
    Parse command-line arguments for bee-stack.

    Supports arguments:
    1. command - setup (default), start, start:infra, stop, clean, check, logs
    2. -d, --dir <path> - Stack directory holding the compose file and .env
    3. -y, --yes - Answer yes to every yes/no prompt
    4. --log-level <level> - Diagnostic logging level (env: BEE_STACK_LOG_LEVEL)
    5. --version - Print version and exit
    """
    parser = argparse.ArgumentParser(
        prog='bee-stack',
        description='bee-stack: set up and run the bee-stack containers',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Commands:
  setup         Choose an LLM provider and write .env (default)
  start         Start the full stack (runs setup first if needed)
  start:infra   Start only the infrastructure services
  stop          Stop all containers (keeps data)
  clean         Remove containers, volumes and ./tmp
  check         Verify the container runtime and compose version
  logs          Collect service logs into ./logs for bug reports

Examples:
  # Interactive setup in the current directory
  %(prog)s

  # Start the stack in a specific directory
  %(prog)s start -d ~/bee-stack

  # Trace every runtime command
  %(prog)s check --log-level DEBUG
        '''
    )

    parser.add_argument(
        'command',
        nargs='?',
        default=DEFAULT_COMMAND,
        metavar='COMMAND',
        help=f'Command to run (default: {DEFAULT_COMMAND})'
    )

    parser.add_argument(
        '-d', '--dir',
        type=Path,
        default=Path.cwd(),
        metavar='PATH',
        help='Stack directory containing the compose file and .env (default: current directory)'
    )

    parser.add_argument(
        '-y', '--yes',
        action='store_true',
        help='Non-interactive confirmations (answer yes to every yes/no prompt)'
    )

    parser.add_argument(
        '--log-level',
        default=os.getenv('BEE_STACK_LOG_LEVEL', 'INFO'),
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        type=str.upper,
        help='Logging level for diagnostics (default: INFO or $BEE_STACK_LOG_LEVEL)'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f"bee-stack {get_cli_version()}"
    )

    return parser.parse_args(argv)


def normalize_command(command: Optional[str]) -> str:
    """
    Examples:
        >>> normalize_command('  Start:Infra ')
        'start:infra'
        >>> normalize_command('')
        'setup'
    """
    return (command or '').strip().lower() or DEFAULT_COMMAND


def run(command: str, root: Path, prompter: Prompter) -> None:
    if command != 'check' and command not in COMMANDS:
        raise UnknownCommand(f"Unknown command {command}")

    if command == 'check':
        check_installation()
        return

    runtime = resolve_runtime(root / ENV_FILE, prompter)
    logger.debug(f"Runtime: {runtime}, stack directory: {root}")
    COMMANDS[command](Stack(root, runtime, prompter))


def main(argv: Optional[list] = None) -> int:
    args = parse_arguments(argv)
    configure_logging(args.log_level)

    root = args.dir.expanduser().resolve()
    command = normalize_command(args.command)
    prompter = Prompter(assume_yes=args.yes)

    try:
        run(command, root, prompter)
    except BeeStackError as e:
        print_error(e.message, e.details)
        if e.show_help:
            print_install_help()
        return e.exit_code
    except EOFError:
        discard_staged_env(root / ENV_FILE)
        print_error("Input closed before all questions were answered.")
        return 1
    except KeyboardInterrupt:
        discard_staged_env(root / ENV_FILE)
        print("\nInterrupted.", flush=True)
        return 130

    return 0


if __name__ == '__main__':
    raise SystemExit(main())
