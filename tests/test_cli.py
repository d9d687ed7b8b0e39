import io
import logging
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from get_stuff_done.core.errors import ElevationError
from get_stuff_done.core.switcher import HostsSwitcher
from get_stuff_done.file_handlers.config_file import DEFAULT_CONFIG, ConfigStore
from get_stuff_done.file_handlers.hosts_file import BANNER
from get_stuff_done.security.privileges import DirectExecutor, PrivilegedExecutor, SystemInstaller
from get_stuff_done.utils import cli

ORIGINAL_HOSTS = b"127.0.0.1 localhost\n"


class RefusingExecutor(PrivilegedExecutor):
    def copy(self, source, target):
        raise ElevationError("sudo: a password is required", returncode=1)


class CliTestCase(unittest.TestCase):
    """Runs the command line against a temporary home and hosts file"""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.system_hosts = self.tmp / "hosts"
        self.system_hosts.write_bytes(ORIGINAL_HOSTS)
        self.store = ConfigStore(config_dir=self.tmp / ".config", system_hosts=self.system_hosts)

    def tearDown(self):
        self._tmp.cleanup()
        logging.getLogger().setLevel(logging.WARNING)

    def switcher(self, executor=None):
        installer = SystemInstaller(self.store, executor or DirectExecutor(),
                                    system_hosts=self.system_hosts)
        return HostsSwitcher(self.store, installer, on_settings=cli.apply_verbosity)

    def run_cli(self, *argv, executor=None):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = cli.main(list(argv), switcher=self.switcher(executor))
        return code, out.getvalue(), err.getvalue()

    def write_config(self, text):
        self.store.config_dir.mkdir(parents=True, exist_ok=True)
        self.store.config_path.write_text(text)


class TestUsage(CliTestCase):
    def test_no_arguments(self):
        code, out, _ = self.run_cli()
        self.assertEqual(code, 0)
        self.assertIn("Usage: get-stuff-done [work|play|-h|--help]", out)
        self.assertFalse(self.store.config_dir.exists())
        self.assertEqual(self.system_hosts.read_bytes(), ORIGINAL_HOSTS)

    def test_help_flags(self):
        for flag in ("-h", "--help"):
            code, out, _ = self.run_cli(flag)
            self.assertEqual(code, 0)
            self.assertIn("COMMANDS/OPTIONS", out)
        self.assertFalse(self.store.config_dir.exists())

    def test_too_many_arguments(self):
        code, out, err = self.run_cli("work", "play")
        self.assertEqual(code, 2)
        self.assertIn("Too many arguments. Got 2, expected 1", err)
        self.assertIn("Usage:", out)
        self.assertEqual(self.system_hosts.read_bytes(), ORIGINAL_HOSTS)

    def test_help_with_another_token(self):
        for argv in (("-h", "work"), ("work", "--help"), ("--", "work"), ("play", "play")):
            code, out, err = self.run_cli(*argv)
            self.assertEqual(code, 2, argv)
            self.assertIn("Too many arguments. Got 2, expected 1", err)
            self.assertIn("Usage:", out)
        self.assertFalse(self.store.config_dir.exists())
        self.assertEqual(self.system_hosts.read_bytes(), ORIGINAL_HOSTS)

    def test_unknown_options(self):
        for token in ("--he", "-x", "--", "--work"):
            code, out, err = self.run_cli(token)
            self.assertEqual(code, 2, token)
            self.assertIn(f"Unrecognized command: {token}", err)
            self.assertIn("Usage: get-stuff-done", out)
        self.assertFalse(self.store.config_dir.exists())

    def test_unknown_command(self):
        code, out, err = self.run_cli("sleep")
        self.assertEqual(code, 2)
        self.assertIn("Unrecognized command: sleep", err)
        self.assertIn("Usage:", out)
        self.assertFalse(self.store.config_dir.exists())


class TestWorkAndPlay(CliTestCase):
    def test_first_run_creates_config_and_baseline(self):
        code, out, _ = self.run_cli("play")
        self.assertEqual(code, 0)
        self.assertEqual(self.store.config_path.read_text(), DEFAULT_CONFIG)
        self.assertEqual(self.store.read_baseline(), BANNER + b"\n" + ORIGINAL_HOSTS)
        self.assertIn(">>> Creating config file", out)

    def test_work_blocks_default_sites(self):
        code, out, _ = self.run_cli("work")
        self.assertEqual(code, 0)
        self.assertEqual(
            self.system_hosts.read_bytes(),
            BANNER + b"\n" + ORIGINAL_HOSTS
            + b"\n# Blocked sites:\n\n127.0.0.1  twitter.com\n127.0.0.1  reddit.com\n",
        )
        self.assertIn("twitter.com reddit.com", out)

    def test_work_is_idempotent(self):
        self.run_cli("work")
        once = self.system_hosts.read_bytes()
        self.run_cli("work")
        self.assertEqual(self.system_hosts.read_bytes(), once)

    def test_work_then_play_restores_baseline(self):
        self.run_cli("work")
        code, _, _ = self.run_cli("play")
        self.assertEqual(code, 0)
        self.assertEqual(self.system_hosts.read_bytes(), self.store.read_baseline())

    def test_baseline_is_never_modified(self):
        self.run_cli("play")
        baseline = self.store.read_baseline()
        for command in ("work", "play", "work"):
            self.run_cli(command)
            self.assertEqual(self.store.read_baseline(), baseline)

    def test_silent_verbosity(self):
        self.write_config("verbosity=silent\nblocked_sites=( 'x.com' )\n")
        code, out, _ = self.run_cli("work")
        self.assertEqual(code, 0)
        self.assertNotIn("Going into work mode", out)
        self.assertTrue(self.system_hosts.read_bytes().endswith(b"127.0.0.1  x.com\n"))

    def test_malformed_config(self):
        self.write_config("verbosity=verbose\n")
        code, _, err = self.run_cli("work")
        self.assertEqual(code, 1)
        self.assertIn("blocked_sites", err)
        self.assertEqual(self.system_hosts.read_bytes(), ORIGINAL_HOSTS)

    def test_play_ignores_malformed_config(self):
        self.run_cli("work")
        self.write_config("verbosity=verbose\n")

        code, _, err = self.run_cli("play")

        self.assertEqual(code, 0)
        self.assertEqual(err, "")
        self.assertEqual(self.system_hosts.read_bytes(), self.store.read_baseline())
        self.assertNotIn(b"# Blocked sites:", self.system_hosts.read_bytes())

    def test_missing_system_hosts_file(self):
        self.system_hosts.unlink()
        code, _, err = self.run_cli("work")
        self.assertEqual(code, 1)
        self.assertIn("!!! Cannot read system hosts file", err)
        self.assertFalse(self.store.baseline_path.exists())

    def test_refused_elevation(self):
        code, _, err = self.run_cli("work", executor=RefusingExecutor())
        self.assertEqual(code, 1)
        self.assertIn("!!! sudo: a password is required", err)
        self.assertEqual(self.system_hosts.read_bytes(), ORIGINAL_HOSTS)


if __name__ == "__main__":
    unittest.main()
