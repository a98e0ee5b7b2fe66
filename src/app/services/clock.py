"""Clock Interface"""

from abc import ABC, abstractmethod


class Clock(ABC):

    @abstractmethod
    def now(self) -> int:
        """Current time in whole seconds; never decreases"""
        pass
