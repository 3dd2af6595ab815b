from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Branch


class BranchRepository(Protocol):
    def get_by_id(self, branch_id: int) -> Optional[Branch]:
        raise NotImplementedError

    def list_by_ids(self, branch_ids: Sequence[int]) -> Sequence[Branch]:
        """Branches for the given ids, in the order of `branch_ids`."""

        raise NotImplementedError
