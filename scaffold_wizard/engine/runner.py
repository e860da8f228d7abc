"""ActionRunner interface - all side effects go here."""

import logging
import os
import subprocess
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import yaml

from .errors import UserCancelledError

logger = logging.getLogger(__name__)


class ActionRunner(ABC):
    """Interface for executing side effects on behalf of wizard steps."""

    # When False, prompt steps fail fast on invalid input instead of re-asking
    interactive: bool = True

    @abstractmethod
    def display(self, message: str) -> None:
        """Display a message to the user.

        Args:
            message: Text to display (may contain newlines)
        """

    @abstractmethod
    def get_input(self, prompt: str, default: Any = None) -> Any:
        """Get input from user.

        Args:
            prompt: Question to ask user
            default: Default value if user presses Enter (shown in [brackets])

        Returns:
            User's input string (or default if empty)

        Raises:
            UserCancelledError: If the user aborts the prompt
        """

    @abstractmethod
    def file_exists(self, path: str) -> bool:
        """Check if file exists at given path."""

    @abstractmethod
    def read_file(self, path: str) -> str:
        """Return the text content of a file."""

    @abstractmethod
    def write_file(self, path: str, content: str) -> None:
        """Write content to a file, replacing it if present."""

    @abstractmethod
    def run_shell(self, command: List[str], cwd: Optional[str] = None) -> Dict[str, Any]:
        """Execute shell command.

        Returns:
            Dict with stdout, stderr and returncode
        """

    @abstractmethod
    def save_config(self, config: dict, path: str) -> None:
        """Deep-merge config into the YAML file at path."""


class RealActionRunner(ActionRunner):
    """Real implementation - actually does things."""

    def __init__(self, verbose: bool = False):
        """Initialize with optional verbose mode.

        Args:
            verbose: If True, let command output flow to the terminal
        """
        self.verbose = verbose
        if os.environ.get('WIZARD_VERBOSE'):
            self.verbose = True

    def display(self, message: str) -> None:
        """Print message to stdout."""
        print(message)

    def get_input(self, prompt: str, default: Any = None) -> Any:
        """Read from stdin with optional default."""
        if default is not None:
            # Special formatting for boolean defaults
            if isinstance(default, bool):
                default_display = 'Y/n' if default else 'y/N'
            else:
                default_display = str(default)
            full_prompt = f"{prompt} [{default_display}]: "
        else:
            full_prompt = f"{prompt}: "

        try:
            response = input(full_prompt).strip()
        except (EOFError, KeyboardInterrupt):
            print()
            raise UserCancelledError() from None

        if response:
            return response
        if default is None:
            return ''
        return default if isinstance(default, bool) else str(default)

    def file_exists(self, path: str) -> bool:
        return os.path.exists(path)

    def read_file(self, path: str) -> str:
        with open(path, 'r') as f:
            return f.read()

    def write_file(self, path: str, content: str) -> None:
        """Write content to a file, creating parent directories."""
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, 'w') as f:
            f.write(content)
        logger.debug("Wrote %s (%d bytes)", path, len(content))

    def run_shell(self, command: List[str], cwd: Optional[str] = None) -> Dict[str, Any]:
        logger.debug("Running command: %s (cwd=%s)", ' '.join(command), cwd or os.getcwd())

        try:
            if self.verbose:
                # Let output flow to the terminal; nothing to capture
                result = subprocess.run(command, cwd=cwd, text=True)
                return {'stdout': '', 'stderr': '', 'returncode': result.returncode}

            result = subprocess.run(command, cwd=cwd, capture_output=True, text=True)
            return {
                'stdout': result.stdout,
                'stderr': result.stderr,
                'returncode': result.returncode
            }
        except FileNotFoundError as e:
            logger.debug("Command not found: %s", command[0])
            return {
                'stdout': '',
                'stderr': f"FileNotFoundError: {e}",
                'returncode': 127  # Standard "command not found" exit code
            }

    def save_config(self, config: dict, path: str) -> None:
        existing_config = {}
        if os.path.exists(path):
            with open(path, 'r') as f:
                existing_config = yaml.safe_load(f) or {}

        merged_config = self._deep_merge(existing_config, config)

        with open(path, 'w') as f:
            yaml.safe_dump(merged_config, f, sort_keys=False)

    def _deep_merge(self, base: dict, update: dict) -> dict:
        """Deep merge update dict into base dict.

        Args:
            base: Base dictionary
            update: Dictionary with updates to merge

        Returns:
            Merged dictionary
        """
        result = base.copy()

        for key, value in update.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


class MockActionRunner(ActionRunner):
    """Mock for testing - records calls."""

    interactive = False

    def __init__(self):
        self.calls = []
        self.responses = {}
        self.input_queue = []  # Pre-scripted user inputs for testing
        self.files: Dict[str, str] = {}  # In-memory filesystem

    def display(self, message: str) -> None:
        """Capture display call for test verification."""
        self.calls.append(('display', message))

    def get_input(self, prompt: str, default: Any = None) -> Any:
        """Return next value from input_queue.

        A queued UserCancelledError (class or instance) is raised instead of
        returned, to script a cancellation.
        """
        self.calls.append(('get_input', prompt, default))

        if self.input_queue:
            response = self.input_queue.pop(0)
            if isinstance(response, type) and issubclass(response, BaseException):
                raise response()
            if isinstance(response, BaseException):
                raise response
            # Match RealActionRunner: apply default if response is empty
            if response == '' or response is None:
                return default if default is not None else ''
            return response

        return default if default is not None else ''

    def file_exists(self, path: str) -> bool:
        self.calls.append(('file_exists', path))
        if path in self.files:
            return True
        return self.responses.get('file_exists', {}).get(path, False)

    def read_file(self, path: str) -> str:
        self.calls.append(('read_file', path))
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path]

    def write_file(self, path: str, content: str) -> None:
        """Record write_file call and keep the content in memory."""
        self.calls.append(('write_file', path, content))
        self.files[path] = content

    def run_shell(self, command: List[str], cwd: Optional[str] = None) -> Dict[str, Any]:
        self.calls.append(('run_shell', command, cwd))

        response = self.responses.get('run_shell')
        if isinstance(response, dict):
            command_tuple = tuple(command)
            if command_tuple in response:
                return response[command_tuple]
            if 'returncode' in response:
                return response

        return {'stdout': '', 'stderr': '', 'returncode': 0}

    def save_config(self, config: dict, path: str) -> None:
        self.calls.append(('save_config', config, path))

    def written_paths(self) -> List[str]:
        """Paths passed to write_file, in call order."""
        return [c[1] for c in self.calls if c[0] == 'write_file']
