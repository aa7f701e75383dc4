from __future__ import annotations

from typing import Protocol, Sequence


class EnrollmentRepository(Protocol):
    def is_enrolled(self, *, section_id: int, student_id: int) -> bool:
        raise NotImplementedError

    def list_student_ids(self, section_id: int) -> Sequence[int]:
        """Roster of a section, in a stable order."""

        raise NotImplementedError
