#!/usr/bin/env python3
import platform
from pathlib import Path

SYSTEM = platform.system()
HOSTS_PATH = Path(r"C:\Windows\System32\drivers\etc\hosts") if SYSTEM == "Windows" else Path("/etc/hosts")

BANNER = b"# Generated by get-stuff-done. Execute get-stuff-done -h for info"
SECTION_HEADER = b"\n# Blocked sites:\n\n"
LOOPBACK = "127.0.0.1"


def render_work_hosts(baseline, domains):
    """Return the work mode hosts content: the baseline followed by one
    loopback mapping per blocked domain, in the given order.

    Domains are neither deduplicated nor validated.
    """
    lines = [f"{LOOPBACK}  {domain}\n".encode("utf-8") for domain in domains]
    return bytes(baseline) + SECTION_HEADER + b"".join(lines)


def strip_generated(content):
    """Undo what get-stuff-done adds to a hosts file.

    Returns a ``(content, generated)`` tuple. ``generated`` is True when the
    content starts with the banner line; in that case the banner is dropped
    and so is any blocked sites section a previous work run appended.
    """
    first_line, newline, rest = content.partition(b"\n")
    if first_line.rstrip(b"\r") != BANNER:
        return content, False

    section_idx = rest.find(SECTION_HEADER)
    if section_idx != -1:
        rest = rest[:section_idx]
    return rest, True
