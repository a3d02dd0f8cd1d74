"""
Storage contract the scheduling core depends on.

The core only reads snapshots and hands new or changed reservations back;
transactions, locking and commit belong to the implementation.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional


class ReservationRepository(ABC):
    # ---------- labs ----------
    @abstractmethod
    def get_lab(self, lab_id):
        ...

    @abstractmethod
    def get_lab_by_name(self, name: str):
        ...

    @abstractmethod
    def list_labs(self) -> List:
        ...

    @abstractmethod
    def lock_lab(self, lab_id):
        """Serialization point for check-then-create on one lab."""

    # ---------- reservations ----------
    @abstractmethod
    def get_reservation(self, reservation_id):
        ...

    @abstractmethod
    def lab_reservations(
        self,
        lab_id,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        include_cancelled: bool = False,
    ) -> List:
        """Reservations on a lab whose interval touches [start, end]."""

    @abstractmethod
    def occupied_reservations(self, lab_id) -> List:
        """OCCUPIED reservations on a lab regardless of date (keys still out)."""

    @abstractmethod
    def new_reservation(self, **fields):
        """Build and stage a reservation; it is persisted on commit()."""

    # ---------- lookups ----------
    @abstractmethod
    def get_school(self, school_id):
        ...

    @abstractmethod
    def admin_actor(self):
        """Creator used for system-generated reservations."""

    # ---------- unit of work ----------
    @abstractmethod
    def commit(self):
        ...

    @abstractmethod
    def rollback(self):
        ...
