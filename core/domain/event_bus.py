"""
Event Bus Interface (Domain Layer).

Pure interface definition - no implementation details.
"""
from abc import ABC, abstractmethod
from typing import List

from .events.base import DomainEvent


class EventBus(ABC):
    """
    Event Bus Interface.

    Services publish the events collected by an aggregate once the unit
    of work that produced them has committed.
    """

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        """
        Publish a single domain event.

        Args:
            event: Domain event to publish
        """
        pass

    @abstractmethod
    async def publish_all(self, events: List[DomainEvent]) -> None:
        """
        Publish multiple domain events in order.

        Args:
            events: List of domain events to publish
        """
        pass
