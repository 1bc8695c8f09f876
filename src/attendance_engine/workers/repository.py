from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Worker


class WorkerRepository(Protocol):
    """Repository interface for workers.

    Note: services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, worker_id: int) -> Optional[Worker]:
        raise NotImplementedError

    def list_active(self, *, limit: Optional[int] = None) -> Sequence[Worker]:
        raise NotImplementedError
