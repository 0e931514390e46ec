"""Synchronous execution of external processes with bounded timeouts."""

import logging
import subprocess

from .base import CommandResult, ProcessFailure

logger = logging.getLogger(__name__)


class ProcessRunner:
    """
    Runs an executable with arguments and captures its output.

    Each call blocks its calling thread until the process finishes or the
    timeout expires. A timed out process is killed and reaped before the
    result is returned. Nothing is retried.
    """

    def __init__(self, default_timeout: int | None = None):
        """
        Initialize the runner.

        Args:
            default_timeout: Timeout in seconds used when ``run`` gets none;
                ``None`` or ``0`` waits indefinitely
        """
        self.default_timeout = default_timeout

    def run(
        self,
        executable: str,
        args: list[str],
        timeout: int | None = None,
        cwd: str | None = None,
    ) -> CommandResult:
        """
        Run a process and wait for it.

        Args:
            executable: Program to start
            args: Ordered argument list
            timeout: Seconds to wait for completion; ``None`` uses the default,
                ``0`` waits indefinitely
            cwd: Optional working directory

        Returns:
            CommandResult: Exit status and full stdout/stderr text
        """
        if timeout is None:
            timeout = self.default_timeout
        wait_timeout = timeout if timeout else None

        command = [executable] + list(args)
        command_display = " ".join(command)
        logger.debug(f"Executing: {command_display}" + (f" in {cwd}" if cwd else ""))

        try:
            process = subprocess.Popen(
                command,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            logger.error(f"Failed to start {command_display}: {e}")
            return CommandResult(
                success=False,
                error=f"Failed to start: {e}",
                exit_code=-1,
                failure=ProcessFailure.FAILED_TO_START,
            )

        try:
            stdout, stderr = process.communicate(timeout=wait_timeout)
        except subprocess.TimeoutExpired:
            process.kill()
            stdout, stderr = process.communicate()
            logger.error(f"Timed out after {timeout} seconds: {command_display}")
            return CommandResult(
                success=False,
                output=stdout or "",
                error=f"Timed out after {timeout} seconds",
                exit_code=process.returncode if process.returncode is not None else -1,
                failure=ProcessFailure.TIMED_OUT,
            )

        success = process.returncode == 0
        if not success:
            logger.warning(
                f"Command failed: {command_display}, "
                f"exit code: {process.returncode}, error: {(stderr or '').strip()}"
            )

        return CommandResult(
            success=success,
            output=stdout or "",
            error=stderr or "",
            exit_code=process.returncode,
        )
