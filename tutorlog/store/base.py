"""
Student Interaction Log — Store Contract
Both backends implement this. Routes only ever talk to an InteractionStore.
"""

from abc import ABC, abstractmethod
from typing import Optional

from tutorlog.records import InteractionRecord
from tutorlog.stats import InteractionStats


class InteractionStore(ABC):
    """Append-only interaction storage."""

    backend: str = ""

    @abstractmethod
    def initialize(self) -> None:
        """Prepare the backing storage. Idempotent."""

    @abstractmethod
    def append(self, record: InteractionRecord) -> Optional[int]:
        """Persist one record. Returns the generated id where the backend has one."""

    @abstractmethod
    def read_all(self) -> list[InteractionRecord]:
        """Every record, timestamp ascending."""

    @abstractmethod
    def read_by_student(self, name: str) -> list[InteractionRecord]:
        ...

    @abstractmethod
    def read_by_class(self, class_name: str) -> list[InteractionRecord]:
        ...

    @abstractmethod
    def aggregate(self) -> InteractionStats:
        ...

    @abstractmethod
    def ping(self) -> bool:
        """True if the storage is reachable."""

    def describe(self) -> dict:
        """Backend-specific fields for the /status response."""
        return {"backend": self.backend}
