#!/usr/bin/env python3


class GetStuffDoneError(Exception):
    """Base class for errors raised by get-stuff-done"""


class ConfigError(GetStuffDoneError):
    """The settings file is missing, unreadable or malformed"""


class UsageError(GetStuffDoneError):
    """Wrong number of arguments or an unknown command"""


class ElevationError(PermissionError):
    """The privileged copy over the system hosts file was refused or failed"""

    def __init__(self, message, returncode=1):
        super().__init__(message)
        self.returncode = returncode or 1
