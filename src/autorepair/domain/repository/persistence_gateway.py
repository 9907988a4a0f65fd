"""Abstract gateway to the transactional store.

Every public operation of the order service runs inside exactly one
``transaction()``: all writes commit together when the block exits
normally and none of them survive if it raises. Read-only queries use
``snapshot()``, which never commits.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from autorepair.domain.repository.order_store import OrderStore


class PersistenceGateway(ABC):

    @abstractmethod
    def transaction(self) -> AbstractContextManager[OrderStore]:
        """Open a unit of work. Commits on success, rolls back on any error.

        Store-level failures surface as PersistenceError; domain errors
        raised inside the block propagate unchanged after the rollback.
        """

    @abstractmethod
    def snapshot(self) -> AbstractContextManager[OrderStore]:
        """Open a read-only view. Nothing written through it is kept."""
