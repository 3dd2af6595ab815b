from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee, EmployeeBranchAssignment


class EmployeeRepository(Protocol):
    """Repository interface for employees and their branch assignments.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_phone(self, phone: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_assignments(self, employee_id: int) -> Sequence[EmployeeBranchAssignment]:
        """All assignments of the employee, whatever their status."""

        raise NotImplementedError

    def get_assignment(self, *, employee_id: int, branch_id: int) -> Optional[EmployeeBranchAssignment]:
        raise NotImplementedError
