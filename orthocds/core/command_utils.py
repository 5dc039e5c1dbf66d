# orthocds/core/command_utils.py
import os
import subprocess
import logging
from typing import List, Optional, Tuple

from orthocds.exceptions import ToolError

logger = logging.getLogger("orthocds.tools.commands")


def run_command(
    cmd: List[str],
    cwd: Optional[str] = None,
    stdout_path: Optional[str] = None,
    timeout: Optional[float] = None,
) -> subprocess.CompletedProcess:
    """Run an external tool once

    The exit status is logged but never raised: callers judge success by the
    files the tool was expected to write.

    Args:
        cmd: Command to run as a list of strings
        cwd: Working directory for the command
        stdout_path: Redirect stdout to this file instead of capturing it
        timeout: Command timeout in seconds

    Returns:
        CompletedProcess object

    Raises:
        ToolError: If the executable cannot be started
    """
    cmd_str = ' '.join(cmd)
    logger.debug(f"Running command: {cmd_str}" + (f" (cwd: {cwd})" if cwd else ""))

    try:
        if stdout_path:
            with open(stdout_path, 'w') as stdout_file:
                result = subprocess.run(
                    cmd,
                    cwd=cwd,
                    text=True,
                    stdout=stdout_file,
                    stderr=subprocess.PIPE,
                    timeout=timeout,
                    check=False
                )
        else:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                text=True,
                capture_output=True,
                timeout=timeout,
                check=False
            )
    except FileNotFoundError as e:
        raise ToolError(f"Executable not found: {cmd[0]}", {"command": cmd_str}) from e
    except subprocess.TimeoutExpired as e:
        raise ToolError(f"Command timed out after {timeout}s: {cmd_str}", {"command": cmd_str}) from e

    if result.returncode != 0:
        logger.warning(f"Command exited with status {result.returncode}: {cmd_str}")
        if result.stderr:
            logger.debug(f"Stderr: {result.stderr.strip()}")

    return result


def check_command_availability(command: str) -> bool:
    """Check if a command is available in the system path

    Args:
        command: Command to check

    Returns:
        True if command is available
    """
    if os.path.isabs(command):
        return os.access(command, os.X_OK)
    try:
        result = subprocess.run(
            ["which", command],
            text=True,
            capture_output=True,
            check=False
        )
        return result.returncode == 0
    except OSError:
        return False


def check_tool_requirements(required_tools: List[str]) -> Tuple[bool, List[str]]:
    """Check if all required tools are available

    Args:
        required_tools: List of required tool commands

    Returns:
        Tuple of (all_available, missing_tools)
    """
    missing_tools = []
    for tool in required_tools:
        if not check_command_availability(tool):
            missing_tools.append(tool)

    return len(missing_tools) == 0, missing_tools
