"""
Join event feed interface.
"""

from abc import ABC, abstractmethod
from typing import List

from huissier.domain.value_objects.join_event import JoinEvent


class IJoinEventFeed(ABC):
    """Pull-based source of channel membership changes."""

    @abstractmethod
    async def fetch(self) -> List[JoinEvent]:
        """
        Fetch membership changes since the previous call.

        Returns every status change for the configured channel; callers
        filter on ``JoinEvent.is_join``.

        Raises:
            InviteIssuerError: On transport failure
        """
