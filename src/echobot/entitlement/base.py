from abc import ABC, abstractmethod

from .models import EntitlementState


class EntitlementProvider(ABC):
    """Answers whether the user holds an active subscription.

    Replaces a shared purchase-manager singleton: the chat layer only ever
    asks ``is_entitled()``; how purchases are verified stays hidden here.
    """

    @abstractmethod
    async def refresh(self) -> EntitlementState:
        """Re-check the subscription and return the new state."""

    @property
    @abstractmethod
    def state(self) -> EntitlementState:
        """State from the most recent check."""

    def is_entitled(self) -> bool:
        return self.state.entitled

    async def close(self) -> None:
        """Release any network resources."""
