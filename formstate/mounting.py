"""One-shot mounting gate.

The gate is open (``is_mounting`` True) from construction until the form's
first stabilization pass, then closes for good. Fields use it to hold back
loading indicators during first paint.
"""

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class MountPhase(str, Enum):
    MOUNTING = "mounting"
    MOUNTED = "mounted"


class MountingGate:
    """Mounting flag that transitions MOUNTING -> MOUNTED exactly once.

    Examples:
        >>> gate = MountingGate()
        >>> gate.is_mounting
        True
        >>> gate.settle()
        True
        >>> gate.settle()
        False
        >>> gate.is_mounting
        False
    """

    def __init__(self) -> None:
        self._phase = MountPhase.MOUNTING

    @property
    def phase(self) -> MountPhase:
        return self._phase

    @property
    def is_mounting(self) -> bool:
        return self._phase is MountPhase.MOUNTING

    def settle(self) -> bool:
        """Close the gate.

        Returns:
            True if this call performed the transition, False if the gate was
            already settled
        """
        if self._phase is MountPhase.MOUNTED:
            return False
        self._phase = MountPhase.MOUNTED
        logger.debug("Form finished mounting")
        return True


__all__ = [
    "MountPhase",
    "MountingGate",
]
