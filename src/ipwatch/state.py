"""Last known IP address storage.

The state file holds nothing but the address string. It is read once
per run and overwritten wholesale when the address changes.
"""

import os
from pathlib import Path

from ipwatch.errors import StateReadError, StateWriteError

__all__ = [
    "StateStore",
    "StateReadError",
    "StateWriteError",
]


class StateStore:
    """File-based store for the last known IP address.

    Attributes:
        path: Path to the state file.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path).expanduser()

    def read(self) -> str | None:
        """Read the previously stored address.

        Returns:
            The stored address with surrounding whitespace removed, or
            None if the file does not exist yet.

        Raises:
            StateReadError: If the file exists but cannot be read.
        """
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StateReadError(
                f"Could not read old IP from file '{self.path}': {e}"
            ) from e
        return content.strip()

    def write(self, address: str) -> None:
        """Replace the stored address.

        Args:
            address: Address to persist.

        Raises:
            StateWriteError: If the file cannot be written.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(address)
        except OSError as e:
            raise StateWriteError(
                f"Could not write IP '{address}' to file '{self.path}': {e}"
            ) from e
