"""Tests for the process runner."""

import os
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import Mock, patch

from repo_manager.services.base import ProcessFailure
from repo_manager.services.process_runner import ProcessRunner


class TestProcessRunner(unittest.TestCase):
    """Test cases for ProcessRunner against real child processes."""

    def setUp(self):
        self.runner = ProcessRunner()

    def test_successful_process_output_is_not_stripped(self):
        result = self.runner.run(
            sys.executable, ["-c", "print('  hello  ')"], timeout=30
        )

        self.assertTrue(result.success)
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.output.replace("\r\n", "\n"), "  hello  \n")
        self.assertEqual(result.error, "")
        self.assertIsNone(result.failure)

    def test_non_zero_exit_captures_stderr(self):
        result = self.runner.run(
            sys.executable,
            ["-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"],
            timeout=30,
        )

        self.assertFalse(result.success)
        self.assertEqual(result.exit_code, 3)
        self.assertEqual(result.error, "boom")
        self.assertIsNone(result.failure)

    def test_timeout_kills_process(self):
        result = self.runner.run(
            sys.executable, ["-c", "import time; time.sleep(30)"], timeout=1
        )

        self.assertFalse(result.success)
        self.assertTrue(result.timed_out)
        self.assertEqual(result.failure, ProcessFailure.TIMED_OUT)
        self.assertEqual(result.error, "Timed out after 1 seconds")

    @unittest.skipIf(sys.platform == "win32", "signal 0 probing is POSIX only")
    def test_timed_out_child_is_not_left_running(self):
        script = (
            "import os, sys, time\n"
            "with open(sys.argv[1], 'w') as f:\n"
            "    f.write(str(os.getpid()))\n"
            "time.sleep(30)\n"
        )
        with tempfile.TemporaryDirectory() as temp_dir:
            pid_file = Path(temp_dir) / "child.pid"

            result = self.runner.run(
                sys.executable, ["-c", script, str(pid_file)], timeout=3
            )

            pid = int(pid_file.read_text())

        self.assertTrue(result.timed_out)
        with self.assertRaises(ProcessLookupError):
            os.kill(pid, 0)

    def test_zero_timeout_waits_for_completion(self):
        result = self.runner.run(
            sys.executable, ["-c", "import time; time.sleep(0.2); print('done')"],
            timeout=0,
        )

        self.assertTrue(result.success)
        self.assertIn("done", result.output)

    def test_missing_executable_fails_to_start(self):
        result = self.runner.run("definitely-not-a-real-executable-xyz", ["--version"])

        self.assertFalse(result.success)
        self.assertTrue(result.failed_to_start)
        self.assertEqual(result.exit_code, -1)
        self.assertTrue(result.error.startswith("Failed to start:"))

    def test_arguments_are_passed_in_order(self):
        result = self.runner.run(
            sys.executable,
            ["-c", "import sys; print('|'.join(sys.argv[1:]))", "a b", "--x", "c"],
            timeout=30,
        )

        self.assertEqual(result.output.strip(), "a b|--x|c")

    def test_cwd_is_used(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            result = self.runner.run(
                sys.executable,
                ["-c", "import os; print(os.getcwd())"],
                timeout=30,
                cwd=temp_dir,
            )

            self.assertEqual(
                Path(result.output.strip()).resolve(), Path(temp_dir).resolve()
            )


class TestProcessRunnerMocked(unittest.TestCase):
    """Test cases for ProcessRunner with a mocked Popen."""

    @patch("subprocess.Popen")
    def test_default_timeout_used_when_none_given(self, mock_popen):
        process = Mock()
        process.communicate.return_value = ("out", "")
        process.returncode = 0
        mock_popen.return_value = process

        runner = ProcessRunner(default_timeout=7)
        result = runner.run("git", ["status"])

        self.assertTrue(result.success)
        process.communicate.assert_called_once_with(timeout=7)
        self.assertEqual(mock_popen.call_args[0][0], ["git", "status"])
        self.assertEqual(mock_popen.call_args[1]["stdin"], subprocess.DEVNULL)

    @patch("subprocess.Popen")
    def test_timeout_kills_and_reaps(self, mock_popen):
        process = Mock()
        process.communicate.side_effect = [
            subprocess.TimeoutExpired(cmd="git", timeout=5),
            ("partial", ""),
        ]
        process.returncode = -9
        mock_popen.return_value = process

        result = ProcessRunner().run("git", ["fetch"], timeout=5)

        process.kill.assert_called_once()
        self.assertEqual(process.communicate.call_count, 2)
        self.assertTrue(result.timed_out)
        self.assertEqual(result.output, "partial")
        self.assertEqual(result.error, "Timed out after 5 seconds")

    @patch("subprocess.Popen", side_effect=PermissionError("denied"))
    def test_permission_error_fails_to_start(self, _mock_popen):
        result = ProcessRunner().run("git", ["status"])

        self.assertTrue(result.failed_to_start)
        self.assertIn("denied", result.error)


if __name__ == "__main__":
    unittest.main()
