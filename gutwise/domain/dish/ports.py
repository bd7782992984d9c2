"""
Ports (Interfaces) for dish analysis dependencies.

Defines the optional remote analysis capability used by the batch
analyzer. The local rule scorer is always the fallback, so any adapter
implementing this port may fail freely.

Design Pattern: Ports & Adapters (Hexagonal Architecture)
"""

from typing import Protocol, runtime_checkable

from gutwise.domain.dish.models import DishInput, DishSafetyAssessment
from gutwise.domain.profile.models import HealthProfile


@runtime_checkable
class IRemoteDishAnalyzer(Protocol):
    """
    Port for an external dish analysis service.

    This is an interface - implementations may use different model
    providers or transports.
    """

    async def try_analyze(
        self,
        dish: DishInput,
        profile: HealthProfile,
        timeout: float,
    ) -> DishSafetyAssessment:
        """
        Analyze one dish remotely.

        Args:
            dish: Dish to analyze
            profile: User health profile
            timeout: Seconds the caller is willing to wait

        Returns:
            DishSafetyAssessment produced by the remote service

        Raises:
            RemoteAnalysisError: On malformed response or transport failure
            RemoteAnalysisTimeoutError: If no answer arrives in time
            RateLimitError: If the provider refuses the request for quota
        """
        ...
