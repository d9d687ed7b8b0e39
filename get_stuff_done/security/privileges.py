#!/usr/bin/env python3
import os
import logging
import platform
import shutil
import subprocess
import tempfile
from pathlib import Path

from get_stuff_done.core.errors import ElevationError
from get_stuff_done.file_handlers.hosts_file import HOSTS_PATH


def is_root():
    try:
        return os.geteuid() == 0
    except AttributeError:
        return False


class PrivilegedExecutor:
    """Copies a file over a target that needs elevated rights to write"""

    def copy(self, source, target):
        raise NotImplementedError


class SudoExecutor(PrivilegedExecutor):
    def __init__(self, sudo="sudo"):
        self.sudo = sudo

    def copy(self, source, target):
        cmd = [self.sudo, "cp", str(source), str(target)]
        try:
            result = subprocess.run(cmd)
        except FileNotFoundError as e:
            raise ElevationError(f"Cannot elevate privileges, {self.sudo} not found") from e

        if result.returncode != 0:
            raise ElevationError(f"Copying {source} to {target} was refused "
                                 f"({self.sudo} exited with {result.returncode})",
                                 returncode=result.returncode)


class DirectExecutor(PrivilegedExecutor):
    """Plain copy, for processes that already have the rights to write the target"""

    def copy(self, source, target):
        try:
            shutil.copyfile(source, target)
        except OSError as e:
            raise ElevationError(f"Failed to copy {source} to {target}: {e}") from e


def default_executor():
    if is_root() or platform.system() == "Windows":
        return DirectExecutor()
    return SudoExecutor()


class SystemInstaller:
    """The only component that writes the system hosts file.

    Content is written in full to a temporary file first and then copied over
    the target, so a refused copy leaves the target untouched.
    """

    def __init__(self, store, executor=None, system_hosts=HOSTS_PATH):
        self.store = store
        self.executor = executor if executor is not None else default_executor()
        self.system_hosts = Path(system_hosts)

    def install(self, content):
        tf = tempfile.NamedTemporaryFile("wb", prefix="get-stuff-done.", suffix=".hosts",
                                         delete=False)
        tmp = tf.name

        try:
            with tf:
                tf.write(content)
            # A new target gets the mode of the source, NamedTemporaryFile uses 0600
            os.chmod(tmp, 0o644)
            self.executor.copy(tmp, self.system_hosts)
        finally:
            os.remove(tmp)

    def restore(self):
        logging.info(f"Copying {self.store.baseline_path} to {self.system_hosts}")
        self.install(self.store.read_baseline())
