"""Tests for mac_cleanup.cli."""
import contextlib
import io
import signal
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from mac_cleanup import cli
from mac_cleanup.core.config import RunConfig
from mac_cleanup.core.errors import AuthorizationError
from mac_cleanup.core.models import ExternalTool
from mac_cleanup.core.targets import paths_target, tool_target

from .helpers import FakeMeter, FakeProbe, FakeSession, console_text, quiet_console, write_file

DOCKER = ExternalTool("docker")
NPM = ExternalTool("npm")


class TestArguments(unittest.TestCase):
    def test_unknown_flag_exits_1_and_names_it(self) -> None:
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr):
            self.assertEqual(cli.main(["--bogus"]), 1)
        self.assertIn("Unknown option: --bogus", stderr.getvalue())

    def test_unknown_short_flag(self) -> None:
        with contextlib.redirect_stderr(io.StringIO()):
            self.assertEqual(cli.main(["-x"]), 1)

    def test_malformed_known_flags_exit_1_and_name_the_token(self) -> None:
        for flag in ("-vx", "--verbose=1", "--no-color=yes"):
            with self.subTest(flag=flag):
                stderr = io.StringIO()
                with mock.patch.object(cli, "run") as run, contextlib.redirect_stderr(stderr):
                    self.assertEqual(cli.main([flag]), 1)
                run.assert_not_called()
                self.assertIn(f"Unknown option: {flag}", stderr.getvalue())

    def test_combined_short_flags_are_accepted(self) -> None:
        with mock.patch.object(cli, "run", return_value=0) as run:
            self.assertEqual(cli.main(["-vu"]), 0)
        cfg = run.call_args[0][0]
        self.assertTrue(cfg.verbose)
        self.assertTrue(cfg.update)

    def test_help_exits_0(self) -> None:
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            with self.assertRaises(SystemExit) as cm:
                cli.main(["--help"])
        self.assertEqual(cm.exception.code, 0)
        self.assertIn("--update", stdout.getvalue())

    def test_known_flags(self) -> None:
        args, unknown = cli.build_parser().parse_known_args(["-v", "--no-color", "-u", "-n"])
        self.assertEqual(unknown, [])
        self.assertTrue(args.verbose)
        self.assertTrue(args.no_color)
        self.assertTrue(args.update)


class TestRun(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)
        self.err = quiet_console()
        self.out = quiet_console()
        self.session = FakeSession()

    def run_cli(self, targets, probe=None, meter=None, cfg=None):
        return cli.run(
            cfg or RunConfig(home=str(self.root)),
            session=self.session,
            probe=probe or FakeProbe(),
            meter=meter or FakeMeter(1000, 2536),
            targets=targets,
            err=self.err,
            out=self.out,
        )

    def test_successful_sweep_reports_space(self) -> None:
        write_file(self.root / "cache" / "f", 10)
        status = self.run_cli([paths_target("cache", "Clearing cache", [str(self.root / "cache")])])
        self.assertEqual(status, 0)
        self.assertEqual(self.session.acquired, 1)
        self.assertEqual(self.session.released, 1)
        self.assertIn("Success! 1.50 KiB of space was cleaned up", console_text(self.out))
        self.assertIn("Clearing cache", console_text(self.err))

    def test_disk_usage_growth_reports_zero(self) -> None:
        self.run_cli([], meter=FakeMeter(5000, 10))
        self.assertIn("Success! 0 Bytes of space was cleaned up", console_text(self.out))

    def test_authorization_failure_is_fatal(self) -> None:
        self.session = FakeSession(fail=AuthorizationError("sudo authentication failed or was declined"))
        probe = FakeProbe(installed={"npm"})
        write_file(self.root / "cache" / "f", 10)
        targets = [
            paths_target("cache", "Cache", [str(self.root / "cache")]),
            tool_target("npm", "npm", NPM, [("cache", "clean", "--force")]),
        ]

        status = self.run_cli(targets, probe=probe)

        self.assertEqual(status, 1)
        self.assertEqual(probe.calls, [])
        self.assertTrue((self.root / "cache" / "f").exists())
        self.assertNotIn("Success", console_text(self.out))
        self.assertEqual(self.session.released, 1)
        self.assertIn("sudo authentication failed", console_text(self.err))

    def test_absent_tool_still_reports_summary(self) -> None:
        probe = FakeProbe(installed=())
        status = self.run_cli([tool_target("docker", "Docker", DOCKER, [("system", "prune", "-af")])], probe=probe)
        self.assertEqual(status, 0)
        self.assertEqual(probe.calls, [])
        self.assertIn("Success!", console_text(self.out))

    def test_measurement_failure_degrades_to_unknown(self) -> None:
        write_file(self.root / "cache" / "f", 10)
        status = self.run_cli([paths_target("cache", "Cache", [str(self.root / "cache")])], meter=FakeMeter(fail=True))
        self.assertEqual(status, 0)
        self.assertFalse((self.root / "cache" / "f").exists())
        self.assertIn("Space reclaimed: unknown", console_text(self.out))

    def test_tool_failure_is_reported_but_not_fatal(self) -> None:
        probe = FakeProbe(installed={"npm"}, statuses={"npm cache clean --force": 1})
        status = self.run_cli([tool_target("npm", "npm", NPM, [("cache", "clean", "--force")])], probe=probe)
        self.assertEqual(status, 0)
        self.assertIn("1 target(s) were only partly cleaned", console_text(self.err))
        self.assertIn("Success!", console_text(self.out))

    def test_verbose_prints_result_table(self) -> None:
        cfg = RunConfig(home=str(self.root), verbose=True)
        self.run_cli([paths_target("gone", "Gone", [str(self.root / "missing")])], cfg=cfg)
        text = console_text(self.err)
        self.assertIn("gone", text)
        self.assertIn("completed", text)

    def test_keyboard_interrupt_releases_once(self) -> None:
        def interrupt(step):
            raise KeyboardInterrupt

        probe = FakeProbe(installed={"npm", "docker"}, on_run=interrupt)
        targets = [
            tool_target("npm", "npm", NPM, [("cache", "clean", "--force")]),
            tool_target("docker", "Docker", DOCKER, [("system", "prune", "-af")]),
        ]

        status = self.run_cli(targets, probe=probe)

        self.assertEqual(status, 130)
        self.assertEqual(probe.calls, ["npm cache clean --force"])
        self.assertEqual(self.session.released, 1)
        self.assertNotIn("Success", console_text(self.out))

    @unittest.skipUnless(hasattr(signal, "SIGTERM"), "needs SIGTERM")
    def test_termination_signal_releases_once(self) -> None:
        def terminate(step):
            signal.raise_signal(signal.SIGTERM)

        probe = FakeProbe(installed={"npm", "docker"}, on_run=terminate)
        targets = [
            tool_target("npm", "npm", NPM, [("cache", "clean", "--force")]),
            tool_target("docker", "Docker", DOCKER, [("system", "prune", "-af")]),
        ]

        before = signal.getsignal(signal.SIGTERM)
        with self.assertRaises(SystemExit) as cm:
            self.run_cli(targets, probe=probe)

        self.assertEqual(cm.exception.code, 128 + signal.SIGTERM)
        self.assertEqual(probe.calls, ["npm cache clean --force"])
        self.assertEqual(self.session.released, 1)
        self.assertEqual(signal.getsignal(signal.SIGTERM), before)


if __name__ == "__main__":
    unittest.main()
