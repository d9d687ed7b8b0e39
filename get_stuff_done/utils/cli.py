#!/usr/bin/env python3
import sys
import logging

from get_stuff_done.core.errors import ConfigError, ElevationError, UsageError
from get_stuff_done.core.switcher import COMMANDS, HostsSwitcher

PROG = "get-stuff-done"
HELP_FLAGS = ("-h", "--help")

USAGE = f"""\
Usage: {PROG} [work|play|-h|--help]

Overwrites the system hosts file in order to block certain websites that
distract you from doing actual work.

COMMANDS/OPTIONS
  work         Block distracting websites
  play         Enable blocked websites
  -h, --help   Print this help message

EXAMPLES

$ {PROG} work
$ {PROG} play

CONFIGURATION

Settings like the list of websites to be blocked are kept in the file
~/.config/{PROG}.conf. The first time this command is run, a default
config file will be created.

The default hosts file (used in "play" mode) is kept in the file
~/.config/{PROG}.hosts. Initially, it is a backup of the system
hosts file. If you want to add entries to the hosts file, you need to add
them here first and execute "{PROG} play". If you edit /etc/hosts
directly, it will be overwritten the next time you execute this command.
"""


def parse_arguments(argv=None):
    """Return the raw command line tokens.

    The tool takes exactly one token, so nothing is interpreted here: ``--``,
    abbreviated options and extra tokens all count towards the total.
    """
    return list(sys.argv[1:] if argv is None else argv)


def usage():
    sys.stdout.write(USAGE)


def configure_logging(level=logging.INFO):
    """Informational lines go to stdout, warnings and errors to stderr"""
    info_handler = logging.StreamHandler(sys.stdout)
    info_handler.setFormatter(logging.Formatter('>>> %(message)s'))
    info_handler.addFilter(lambda record: record.levelno < logging.WARNING)

    error_handler = logging.StreamHandler(sys.stderr)
    error_handler.setFormatter(logging.Formatter('!!! %(message)s'))
    error_handler.setLevel(logging.WARNING)

    logging.basicConfig(level=level, handlers=[info_handler, error_handler], force=True)


def apply_verbosity(settings):
    logging.getLogger().setLevel(logging.INFO if settings.verbose else logging.WARNING)


def select_command(tokens):
    """Return the command to run, or None when only the usage is wanted"""
    if not tokens:
        return None
    if len(tokens) > 1:
        raise UsageError(f"Too many arguments. Got {len(tokens)}, expected 1")
    command = tokens[0]
    if command in HELP_FLAGS:
        return None
    if command not in COMMANDS:
        raise UsageError(f"Unrecognized command: {command}")
    return command


def main(argv=None, switcher=None):
    """Main entry point"""
    tokens = parse_arguments(argv)

    # Settings are not loaded yet, log at the default verbosity
    configure_logging()

    try:
        command = select_command(tokens)
        if command is None:
            usage()
            return 0

        if switcher is None:
            switcher = HostsSwitcher(on_settings=apply_verbosity)
        switcher.run(command)
    except UsageError as e:
        logging.error(e)
        usage()
        return 2
    except ConfigError as e:
        logging.error(e)
        return 1
    except ElevationError as e:
        logging.error(e)
        return e.returncode

    return 0


if __name__ == "__main__":
    sys.exit(main())
