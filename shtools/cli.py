#!/usr/bin/env python3
"""
shtools command-line entry points

Every command builds its parser, loads the configuration, sets up logging,
turns the parsed arguments into an immutable options object and hands it to
the component that does the work. Errors are printed as ``Error: <message>``
on stderr and mapped to exit codes.
"""

from __future__ import annotations

import argparse
import itertools
import logging
import os
import sys
import traceback
from typing import Callable

from shtools.__version__ import __version__
from shtools.config import load_config
from shtools.copier import ARGS, FILE, STDIN, TARGET_BOTH, TARGET_CLIPBOARD, TARGET_SELECTION
from shtools.copier import ClipboardCopier, CopyOptions
from shtools.errors import ShtoolsError, UsageError
from shtools.installer import install_scripts
from shtools.log import setup_logging
from shtools.notify import get_notifier
from shtools.notify.base import NullNotifier
from shtools.platform.subprocess_impl import SubprocessSystemAdapter
from shtools.platform.system_adapter import ISystemAdapter
from shtools.runner import BackgroundRunner, RunJob
from shtools.scaffold import scaffold
from shtools.signaler import ProcessSignaler, SignalRequest, resolve_signal
from shtools.watcher import WatchOptions, follow

logger = logging.getLogger(__name__)

# Module-level system instance (tests replace it with a mock)
SYSTEM: ISystemAdapter = SubprocessSystemAdapter()

Action = Callable[[argparse.Namespace, dict], int]


class ArgumentParser(argparse.ArgumentParser):
    """argparse parser that reports errors as ``UsageError`` (exit 1)."""

    def error(self, message: str):
        raise UsageError(message)


def _make_parser(prog: str, description: str, **kwargs) -> ArgumentParser:
    parser = ArgumentParser(prog=prog, description=description, **kwargs)
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug mode with verbose logging'
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to config file (default: ~/.config/shtools/config.json)'
    )
    parser.add_argument(
        '--logfile',
        type=str,
        default=None,
        help='Path to log file (default: ~/.shtools.log)'
    )
    parser.add_argument(
        '--version',
        action='version',
        version='%(prog)s ' + __version__
    )
    return parser


def _report(parser: argparse.ArgumentParser, error: ShtoolsError) -> int:
    print(f"Error: {error.message}", file=sys.stderr)
    if error.show_usage:
        parser.print_usage(sys.stderr)
    return error.exit_code


def _execute(parser: ArgumentParser, argv: list[str] | None, action: Action) -> int:
    try:
        args = parser.parse_args(argv)
    except UsageError as e:
        return _report(parser, e)

    config = load_config(args.config, args.debug)
    debug = args.debug or config['debug']
    log = setup_logging(debug=debug, log_file=args.logfile or config['log_file'])
    log.debug(f"{parser.prog} {__version__} started, pid {os.getpid()}")

    try:
        return action(args, config)
    except ShtoolsError as e:
        log.debug(traceback.format_exc())
        return _report(parser, e)
    except KeyboardInterrupt:
        log.debug(f"{parser.prog} interrupted")
        return 0
    except BrokenPipeError:
        log.debug(f"{parser.prog}: broken pipe")
        return 1


def _invocation_names(default: str) -> tuple[str, ...]:
    name = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else ''
    if name and name != default and not name.endswith('.py'):
        return (default, name)
    return (default,)


# ------------------------------------------------------------------
# copy
# ------------------------------------------------------------------

def copy_parser() -> ArgumentParser:
    parser = _make_parser(
        'copy',
        'Copy standard input, a file or text into the X clipboard and/or selection.',
    )
    target = parser.add_mutually_exclusive_group()
    target.add_argument('-c', dest='target', action='store_const', const=TARGET_CLIPBOARD,
                        help='Copy to the clipboard only (default)')
    target.add_argument('-x', dest='target', action='store_const', const=TARGET_SELECTION,
                        help='Copy to the selection (middle-click paste) only')
    target.add_argument('-b', dest='target', action='store_const', const=TARGET_BOTH,
                        help='Copy to both the clipboard and the selection')
    source = parser.add_mutually_exclusive_group()
    source.add_argument('-f', dest='source', action='store_const', const=FILE,
                        help='Copy the contents of FILE')
    source.add_argument('-a', dest='source', action='store_const', const=ARGS,
                        help='Copy the given TEXT arguments')
    parser.add_argument('values', nargs='*', metavar='FILE|TEXT')
    parser.set_defaults(target=TARGET_CLIPBOARD, source=STDIN)
    return parser


def _copy(args: argparse.Namespace, config: dict) -> int:
    options = CopyOptions(source=args.source, target=args.target, values=tuple(args.values))
    logger.debug(f"Copy options: {options}")
    copier = ClipboardCopier(SYSTEM, stdin=getattr(sys.stdin, "buffer", sys.stdin))
    copier.copy(options)
    return 0


def copy_main(argv: list[str] | None = None) -> int:
    return _execute(copy_parser(), argv, _copy)


# ------------------------------------------------------------------
# nkill
# ------------------------------------------------------------------

def nkill_parser() -> ArgumentParser:
    parser = _make_parser(
        'nkill',
        'Send SIGNAL (default TERM) to every process whose command line contains NAME.',
        usage='%(prog)s [-h] [SIGNAL] NAME',
    )
    parser.add_argument('args', nargs='*', metavar='[SIGNAL] NAME')
    return parser


def _nkill(args: argparse.Namespace, config: dict) -> int:
    if len(args.args) == 1:
        request = SignalRequest(pattern=args.args[0])
    elif len(args.args) == 2:
        request = SignalRequest(pattern=args.args[1], signum=resolve_signal(args.args[0]))
    elif not args.args:
        raise UsageError("Missing process name")
    else:
        raise UsageError("Too many arguments")

    if not request.pattern:
        raise UsageError("Process name must not be empty")

    signaler = ProcessSignaler(SYSTEM, self_names=_invocation_names('nkill'))
    signaler.send(request)
    return 0


# Options of the nkill parser that take a value
_NKILL_VALUE_OPTIONS = ('--config', '--logfile')


def _nkill_argv(argv: list[str]) -> list[str]:
    """Move every operand behind ``--`` so ``-KILL`` style signals stay positional."""
    options, operands = [], []
    tokens = iter(argv)
    for token in tokens:
        if token == '--':
            operands.extend(tokens)
        elif token == '-h' or token.startswith('--'):
            options.append(token)
            if token in _NKILL_VALUE_OPTIONS:
                options.extend(itertools.islice(tokens, 1))
        else:
            operands.append(token)
    return options + ['--'] + operands


def nkill_main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    return _execute(nkill_parser(), _nkill_argv(argv), _nkill)


# ------------------------------------------------------------------
# wtch
# ------------------------------------------------------------------

def wtch_parser() -> ArgumentParser:
    parser = _make_parser(
        'wtch',
        'Print lines appended to FILE, optionally only those matching PATTERN.',
    )
    parser.add_argument('-n', '--lines', type=int, default=0, metavar='N',
                        help='Also print the last N existing lines first')
    parser.add_argument('file', metavar='FILE')
    parser.add_argument('pattern', nargs='?', metavar='PATTERN',
                        help='Regular expression lines must match')
    return parser


def _wtch(args: argparse.Namespace, config: dict) -> int:
    if args.lines < 0:
        raise UsageError("Line count must not be negative")
    options = WatchOptions(
        path=args.file,
        pattern=args.pattern,
        initial_lines=args.lines,
        poll_interval=config['poll_interval'],
    )
    for line in follow(options):
        sys.stdout.write(line)
        sys.stdout.flush()
    return 0


def wtch_main(argv: list[str] | None = None) -> int:
    return _execute(wtch_parser(), argv, _wtch)


# ------------------------------------------------------------------
# bgrun
# ------------------------------------------------------------------

def bgrun_parser() -> ArgumentParser:
    parser = _make_parser(
        'bgrun',
        "Run 'command' in the background, detached from the terminal.",
        usage="%(prog)s [options] 'command'",
    )
    parser.add_argument('-o', dest='stdout', default=os.devnull, metavar='FILE',
                        help='Append standard output to FILE (default: discard)')
    parser.add_argument('-e', dest='stderr', default=os.devnull, metavar='FILE',
                        help='Append standard error to FILE (default: discard)')
    parser.add_argument('-n', dest='notify', action='store_true',
                        help='Show a desktop notification when the command ends')
    parser.add_argument('command', nargs='?', help='Command line, evaluated by the shell')
    return parser


def _bgrun(args: argparse.Namespace, config: dict) -> int:
    if not args.command:
        raise UsageError("Missing command")

    job = RunJob(
        command=args.command,
        stdout=args.stdout,
        stderr=args.stderr,
        notify=args.notify,
        shell=config['shell'],
        nice=config['nice'],
    )
    if job.notify:
        notifier = get_notifier(config['notifier'], SYSTEM, timeout=config['notify_timeout'])
    else:
        notifier = NullNotifier()
    logger.debug(f"Job: {job}, notifier: {notifier.name}")

    BackgroundRunner(SYSTEM, notifier).launch(job)
    return 0


def bgrun_main(argv: list[str] | None = None) -> int:
    return _execute(bgrun_parser(), argv, _bgrun)


# ------------------------------------------------------------------
# mkscript
# ------------------------------------------------------------------

def mkscript_parser() -> ArgumentParser:
    parser = _make_parser(
        'mkscript',
        'Create empty executable scripts, skipping names already taken.',
    )
    parser.add_argument('-d', '--dir', default='.', metavar='DIR',
                        help='Directory to create the scripts in (default: current)')
    parser.add_argument('names', nargs='+', metavar='NAME')
    return parser


def _mkscript(args: argparse.Namespace, config: dict) -> int:
    for result in scaffold(args.names, args.dir, config['shebang'], SYSTEM.which):
        if result.created:
            print(f"Created {result.path}")
        else:
            print(f"Error: {result.reason}", file=sys.stderr)
    return 0


def mkscript_main(argv: list[str] | None = None) -> int:
    return _execute(mkscript_parser(), argv, _mkscript)


# ------------------------------------------------------------------
# configure
# ------------------------------------------------------------------

def configure_parser() -> ArgumentParser:
    parser = _make_parser(
        'configure',
        'Make the scripts of SOURCE executable and link them into BINDIR.',
    )
    parser.add_argument('-s', '--source', default=None, metavar='SOURCE',
                        help='Directory holding the scripts (default: the directory '
                             'of the configure launcher; required otherwise)')
    parser.add_argument('bin_dir', nargs='?', default=None, metavar='BINDIR',
                        help='Target bin directory (default: ~/bin)')
    return parser


CONFIGURE_LAUNCHER = 'configure'


def _launcher_directory() -> str | None:
    """Directory of the ``configure`` launcher, if that is what is running."""
    if not sys.argv or not sys.argv[0]:
        return None
    launcher = os.path.abspath(sys.argv[0])
    if os.path.basename(launcher) != CONFIGURE_LAUNCHER:
        return None
    return os.path.dirname(launcher)


def _configure(args: argparse.Namespace, config: dict) -> int:
    source = args.source or _launcher_directory()
    if not source:
        raise UsageError("Missing source directory (use -s SOURCE)")
    bin_dir = os.path.expanduser(args.bin_dir or config['bin_dir'])

    skip = config['install_skip_pattern']
    for link in install_scripts(source, bin_dir, skip, self_name=CONFIGURE_LAUNCHER):
        print(f"Linked {link}")
    return 0


def configure_main(argv: list[str] | None = None) -> int:
    return _execute(configure_parser(), argv, _configure)


# ------------------------------------------------------------------
# shtools <command>
# ------------------------------------------------------------------

COMMANDS: dict[str, Callable[[list[str] | None], int]] = {
    'copy': copy_main,
    'nkill': nkill_main,
    'wtch': wtch_main,
    'bgrun': bgrun_main,
    'mkscript': mkscript_main,
    'configure': configure_main,
}


def main(argv: list[str] | None = None) -> int:
    """Dispatch ``shtools <command> [args...]`` to the command's entry point."""
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] in ('-h', '--help'):
        print(f"usage: shtools {{{','.join(COMMANDS)}}} [args...]",
              file=sys.stdout if argv else sys.stderr)
        return 0 if argv else 1
    if argv[0] == '--version':
        print(f"shtools {__version__}")
        return 0

    command = COMMANDS.get(argv[0])
    if command is None:
        print(f"Error: Unknown command '{argv[0]}'", file=sys.stderr)
        return 1
    return command(argv[1:])


if __name__ == '__main__':
    sys.exit(main())
