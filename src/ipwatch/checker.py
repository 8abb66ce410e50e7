"""IP change detection.

One pass: resolve the current public IP, compare it with the stored
one and, when it changed, email the operator and store the new value.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Protocol

from ipwatch.config import Config, load_config
from ipwatch.errors import StateWriteError
from ipwatch.logging import apply_config
from ipwatch.notifier import EmailNotifier
from ipwatch.resolver import AddressResolver, HttpAddressResolver
from ipwatch.state import StateStore

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Protocol for change notification."""

    def notify(self, previous: str | None, current: str) -> None:
        """Report a change. Raises NotificationError on failure."""
        ...


class CheckOutcome(Enum):
    """Result of comparing the current and previous address."""

    UNCHANGED = "unchanged"
    CHANGED = "changed"


@dataclass(frozen=True)
class CheckResult:
    """Outcome of a single check.

    Attributes:
        outcome: Whether a change was detected.
        previous: Stored address before the check, None on first run.
        current: Address resolved during the check.
        persisted: Whether the current address was written to the state file.
    """

    outcome: CheckOutcome
    previous: str | None
    current: str
    persisted: bool = False

    @property
    def changed(self) -> bool:
        return self.outcome is CheckOutcome.CHANGED


class IpChangeChecker:
    """Compares the public IP with the last known one and reacts to changes.

    The notification is always sent before the new address is stored, so
    a failed notification leaves the old address in place and the next
    run detects the change again.
    """

    def __init__(
        self,
        resolver: AddressResolver,
        store: StateStore,
        notifier: Notifier,
    ):
        """Initialize checker.

        Args:
            resolver: Public IP source.
            store: Last known IP storage.
            notifier: Called once per detected change.
        """
        self._resolver = resolver
        self._store = store
        self._notifier = notifier

    async def run(self) -> CheckResult:
        """Perform one check.

        Returns:
            CheckResult describing what happened.

        Raises:
            FatalError: If resolving, reading state or notifying fails.
        """
        logger.debug("Starting check...")

        current = await self._resolver.resolve()

        previous = self._store.read()
        if previous is None:
            logger.info(f"File '{self._store.path}' doesn't exist yet. Creating...")
            if self._persist(current):
                logger.info(f"File '{self._store.path}' created.")
        else:
            logger.info(f"Old external IP is '{previous}' read from '{self._store.path}'.")

        if previous is not None and previous == current:
            logger.info("Same IP as before, nothing to do.")
            logger.debug("Check completed successfully.")
            return CheckResult(CheckOutcome.UNCHANGED, previous, current)

        logger.info("New IP detected. Emailing and storing new IP...")
        self._notifier.notify(previous, current)
        persisted = self._persist(current)

        logger.debug("Check completed successfully.")
        return CheckResult(CheckOutcome.CHANGED, previous, current, persisted)

    def _persist(self, address: str) -> bool:
        """Write address, downgrading failure to a warning.

        Returns:
            True if the write succeeded.
        """
        try:
            self._store.write(address)
        except StateWriteError as e:
            logger.warning(
                f"{e}. Will continue to operate, however emails will be "
                "sent on each check until the file can be written."
            )
            return False
        return True


async def run_check(
    config_path: Path | None = None,
    state_file: Path | None = None,
    config_loader: Callable[[Path | None], Config] = load_config,
) -> CheckResult:
    """Load configuration and run one check with real components.

    Args:
        config_path: Config file override.
        state_file: State file override (takes precedence over config).
        config_loader: Injectable config loader for testing.

    Returns:
        CheckResult of the run.

    Raises:
        FatalError: On any fatal failure. Configuration errors are raised
            before any network activity.
    """
    config = config_loader(config_path)
    apply_config(config)

    store = StateStore(state_file or Path(config.state_file))
    notifier = EmailNotifier(config.email)

    async with HttpAddressResolver(config.ip_service_url) as resolver:
        checker = IpChangeChecker(resolver, store, notifier)
        return await checker.run()
