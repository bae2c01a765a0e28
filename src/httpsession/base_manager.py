"""
Abstract Base Manager

A manager acquires the Session of an incoming request and tells the client
about a Session (or its end) through the outgoing response. Each manager has
a backing Store which keeps the Session values at the server side.
"""

from abc import ABC, abstractmethod
from typing import Optional

from starlette.requests import HTTPConnection
from starlette.responses import Response

from .session import Session


class Manager(ABC):
    """Abstract base class for session managers."""

    @abstractmethod
    def get(self, request: HTTPConnection) -> Optional[Session]:
        """
        Get the session of a request.

        Args:
            request: The incoming request (or websocket connection)

        Returns:
            The Session, or None if the request carries no session id or the
            id is unknown to the backing store
        """
        pass

    @abstractmethod
    def add(self, session: Session, response: Response) -> None:
        """
        Add a session: let the client know about it through the response,
        and store it.

        Args:
            session: The new session
            response: The outgoing response
        """
        pass

    @abstractmethod
    def remove(self, session: Session, response: Response) -> None:
        """
        Remove a session: instruct the client to drop its id, and remove it
        from the store.

        Args:
            session: The session to end
            response: The outgoing response
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the manager, releasing any resources that were allocated."""
        pass

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - automatic cleanup."""
        self.close()
