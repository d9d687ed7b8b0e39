#!/usr/bin/env python3
import logging

from get_stuff_done.core.errors import UsageError
from get_stuff_done.file_handlers.config_file import ConfigStore
from get_stuff_done.file_handlers.hosts_file import render_work_hosts
from get_stuff_done.security.privileges import SystemInstaller

COMMANDS = ("work", "play")


class HostsSwitcher:
    """Switches the system hosts file between work and play mode.

    Each run is a single transition: the settings are loaded fresh and the
    system hosts file is overwritten in full.
    """

    def __init__(self, store=None, installer=None, on_settings=None):
        self.store = store if store is not None else ConfigStore()
        self.installer = installer if installer is not None else SystemInstaller(self.store)
        # Called with the loaded Settings, used to apply the verbosity
        self.on_settings = on_settings

    def _load_settings(self):
        self.store.ensure()
        settings = self.store.load()
        if self.on_settings is not None:
            self.on_settings(settings)
        return settings

    def work(self):
        settings = self._load_settings()
        logging.info("Going into work mode, blocking distracting sites:")
        logging.info(" ".join(settings.blocked_domains))

        content = render_work_hosts(self.store.read_baseline(), settings.blocked_domains)
        self.installer.install(content)

    def play(self):
        # Restoring needs only the baseline, a broken settings file must not block it
        self.store.ensure()
        self.installer.restore()

    def run(self, command):
        if command == "work":
            self.work()
        elif command == "play":
            self.play()
        else:
            raise UsageError(f"Unrecognized command: {command}")
