"""
Interfaces for the templex resolution pipeline.

A resolution strategy is one way of turning a variable expression into a
literal value set. The orchestrator evaluates an ordered list of strategies
and stops at the first one that produces values, so strategies can be added,
removed or reordered without touching each other.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from templex.models.resolution import ResolutionContext, ResolutionRequest

class IResolutionStrategy(ABC):
    """
    Interface for resolution strategies.

    Implementations must be side-effect free apart from the context they are
    given, and return an empty list when they cannot help.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name used in log messages."""
        pass

    def applies_to(self, request: 'ResolutionRequest') -> bool:
        """
        Decide whether the strategy should be attempted for ``request``.

        Args:
            request: The expression to resolve

        Returns:
            True if ``attempt`` should be called
        """
        return True

    @abstractmethod
    async def attempt(self, request: 'ResolutionRequest', ctx: 'ResolutionContext') -> List[str]:
        """
        Try to resolve ``request``.

        Args:
            request: The expression to resolve, with its unit and position
            ctx: A fresh resolution context owned by this attempt

        Returns:
            The literal values found, or an empty list
        """
        pass
