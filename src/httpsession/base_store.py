"""
Abstract Base Store

This module contains the abstract base class that defines the interface
for all session store implementations.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .session import Session


class Store(ABC):
    """
    Abstract base class for session stores.

    A store keeps Session values at the server side and makes them
    retrievable by their ids. Managers use this interface without knowing
    the underlying storage mechanism, so alternate backends (e.g. a remote
    cache) can be plugged in as sibling implementations.
    """

    @abstractmethod
    def get(self, session_id: str) -> Optional[Session]:
        """
        Get a session by its id.

        A returned session has had its access time refreshed.

        Args:
            session_id: The session identifier

        Returns:
            The Session, or None if the store does not contain it
        """
        pass

    @abstractmethod
    def add(self, session: Session) -> None:
        """
        Add a session to the store, keyed by its id.

        Args:
            session: The session to store
        """
        pass

    @abstractmethod
    def remove(self, session: Session) -> None:
        """
        Remove a session from the store. Removing an absent session is a no-op.

        Args:
            session: The session to remove
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the store, releasing any resources that were allocated."""
        pass

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - automatic cleanup."""
        self.close()
