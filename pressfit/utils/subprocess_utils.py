"""Utilities for subprocess execution with error handling."""

import logging
import shutil
import subprocess

from pressfit.core.errors import MissingDependencyError

logger = logging.getLogger(__name__)


def run_command(cmd, check=True, capture_output=True, timeout=None):
    """Run a subprocess command with consistent handling.

    Args:
        cmd: Command to run as a list of strings
        check: Whether to raise an exception if the command fails
        capture_output: Whether to capture stdout/stderr
        timeout: Seconds before the command is killed (default: no limit)

    Returns:
        CompletedProcess instance
    """
    logger.debug("Running: %s", " ".join(cmd))

    result = subprocess.run(
        cmd,
        check=False,  # We'll handle errors ourselves
        capture_output=capture_output,
        timeout=timeout,
    )

    if check and result.returncode != 0:
        error_msg = result.stderr if capture_output else b"Unknown error"
        logger.debug(
            "Command failed: %s: %s",
            " ".join(cmd),
            error_msg.decode(errors="replace").strip(),
        )
        raise subprocess.CalledProcessError(
            result.returncode, cmd, result.stdout, result.stderr
        )

    return result


def check_command_exists(command):
    """Check if a command exists in the system PATH.

    Args:
        command: Command name to check

    Returns:
        bool: True if command exists, False otherwise
    """
    return shutil.which(command) is not None


def check_dependencies(required_tools):
    """Verify required system utilities are available.

    Args:
        required_tools: List of command-line tools to check for

    Raises:
        MissingDependencyError: If any required tool is missing
    """
    missing = [tool for tool in required_tools if not check_command_exists(tool)]

    if missing:
        raise MissingDependencyError(
            f"Missing required tools: {', '.join(missing)}. "
            "Please install them before running this script."
        )
