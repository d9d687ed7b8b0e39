#!/usr/bin/env python3
import logging
import shlex
from dataclasses import dataclass
from pathlib import Path

from get_stuff_done.core.errors import ConfigError
from get_stuff_done.file_handlers.hosts_file import BANNER, HOSTS_PATH, strip_generated

CONFIG_DIR = Path.home() / ".config"
CONFIG_NAME = "get-stuff-done.conf"
BASELINE_NAME = "get-stuff-done.hosts"

VERBOSITIES = ("silent", "verbose")
REQUIRED_KEYS = ("verbosity", "blocked_sites")

DEFAULT_CONFIG = """\
# Config for get-stuff-done. Execute get-stuff-done -h for info.
# verbosity (silent or verbose)
verbosity=verbose
# list of sites to be blocked
blocked_sites=( 'twitter.com' 'reddit.com' )
"""


@dataclass(frozen=True)
class Settings:
    verbosity: str = "verbose"
    blocked_domains: tuple = ("twitter.com", "reddit.com")

    @property
    def verbose(self):
        return self.verbosity == "verbose"


def _split_list(text):
    """Split a parenthesised list with shell quoting, "(" and ")" as separate tokens"""
    lexer = shlex.shlex(text, posix=True, punctuation_chars="()")
    lexer.whitespace_split = True
    tokens = []
    for token in lexer:
        # Runs of parentheses come out as one token, e.g. "()"
        if token and set(token) <= {"(", ")"}:
            tokens.extend(token)
        else:
            tokens.append(token)
    return tokens


def parse_settings(text, source="<config>"):
    """Parse settings text into a Settings value.

    The format is a list of ``key=value`` lines. A value enclosed in
    parentheses is a list and may span several lines. Values are split with
    shell quoting rules but never executed.
    """
    values = {}
    lines = text.splitlines()
    lineno = 0
    while lineno < len(lines):
        line = lines[lineno].strip()
        lineno += 1
        if not line or line.startswith("#"):
            continue

        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ConfigError(f"{source}:{lineno}: expected key=value, got {line!r}")

        start = lineno
        value = value.strip()
        if not value.startswith("("):
            try:
                values[key] = " ".join(shlex.split(value, comments=True))
            except ValueError as e:
                raise ConfigError(f"{source}:{start}: cannot parse value of {key!r}: {e}") from e
            continue

        # A list ends at the first unquoted ")" outside a comment
        while True:
            try:
                tokens = _split_list(value)
            except ValueError as e:
                tokens, error = None, e
            if tokens is not None and ")" in tokens:
                break
            if lineno >= len(lines):
                if tokens is None:
                    raise ConfigError(f"{source}:{start}: cannot parse value of {key!r}: {error}")
                raise ConfigError(f"{source}:{start}: unterminated list for {key!r}")
            value += "\n" + lines[lineno]
            lineno += 1

        close = tokens.index(")")
        if close != len(tokens) - 1:
            raise ConfigError(f"{source}:{start}: unexpected text after the list for {key!r}")
        values[key] = tokens[1:close]

    for key in values:
        if key not in REQUIRED_KEYS:
            logging.warning(f"{source}: ignoring unknown setting {key!r}")

    missing = [key for key in REQUIRED_KEYS if key not in values]
    if missing:
        raise ConfigError(f"{source}: missing required setting(s): {', '.join(missing)}")

    verbosity = values["verbosity"]
    if verbosity not in VERBOSITIES:
        raise ConfigError(f"{source}: verbosity must be one of {', '.join(VERBOSITIES)}, got {verbosity!r}")

    blocked_sites = values["blocked_sites"]
    if not isinstance(blocked_sites, list):
        raise ConfigError(f"{source}: blocked_sites must be a list, e.g. blocked_sites=( 'example.com' )")

    return Settings(verbosity=verbosity, blocked_domains=tuple(blocked_sites))


class ConfigStore:
    """Owns the settings file and the baseline snapshot of the hosts file"""

    def __init__(self, config_dir=None, system_hosts=HOSTS_PATH):
        self.config_dir = Path(config_dir) if config_dir is not None else CONFIG_DIR
        self.config_path = self.config_dir / CONFIG_NAME
        self.baseline_path = self.config_dir / BASELINE_NAME
        self.system_hosts = Path(system_hosts)

    def ensure(self):
        """Create the settings file and the baseline snapshot if they are missing"""
        if not self.config_path.exists():
            logging.info(f"Creating config file {self.config_path}")
            try:
                self.config_dir.mkdir(parents=True, exist_ok=True)
                self.config_path.write_text(DEFAULT_CONFIG, encoding="utf-8")
            except OSError as e:
                raise ConfigError(f"Cannot create config file {self.config_path}: {e}") from e

        if not self.baseline_path.exists():
            self.capture_baseline()

    def capture_baseline(self):
        logging.info(f"Making a backup of the system hosts file to {self.baseline_path}")
        try:
            content, generated = strip_generated(self.system_hosts.read_bytes())
        except OSError as e:
            raise ConfigError(f"Cannot read system hosts file {self.system_hosts}: {e}") from e
        if generated:
            logging.warning(f"{self.system_hosts} was generated by get-stuff-done, "
                            f"recovering the original entries")
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.baseline_path.write_bytes(BANNER + b"\n" + content)
        except OSError as e:
            raise ConfigError(f"Cannot write baseline hosts file {self.baseline_path}: {e}") from e

    def load(self):
        try:
            text = self.config_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Cannot read config file {self.config_path}: {e}") from e
        return parse_settings(text, source=str(self.config_path))

    def read_baseline(self):
        try:
            return self.baseline_path.read_bytes()
        except OSError as e:
            raise ConfigError(f"Cannot read baseline hosts file {self.baseline_path}: {e}") from e
