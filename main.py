#!/usr/bin/env python3
"""
get-stuff-done - Block distracting websites while you work.

Switches the system hosts file between "work" mode, where the sites listed
in ~/.config/get-stuff-done.conf resolve to 127.0.0.1, and "play" mode,
which restores the hosts file saved on the first run.

Usage:
    python main.py work  # Block distracting websites
    python main.py play  # Enable blocked websites
"""
import sys

from get_stuff_done.utils.cli import main

if __name__ == "__main__":
    sys.exit(main())
