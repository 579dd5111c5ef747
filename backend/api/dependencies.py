"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together the analysis
service and its model caller. Routes depend on interfaces; the concrete
implementations are created here.
"""

from typing import TYPE_CHECKING

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.analysis.interfaces import IAnalysisService, IModelCaller


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached as singletons
    within the container. Use reset() to clear them for testing.
    """

    def __init__(self) -> None:
        self._model_caller: "IModelCaller | None" = None
        self._analysis_service: "IAnalysisService | None" = None

    @property
    def model_caller(self) -> "IModelCaller":
        """Get the model caller for the configured analysis models."""
        if self._model_caller is None:
            from modules.analysis.model_caller import LangChainModelCaller
            from shared.config import get_settings
            self._model_caller = LangChainModelCaller.from_settings(get_settings())
        return self._model_caller

    @property
    def analysis(self) -> "IAnalysisService":
        """Get the analysis service instance."""
        if self._analysis_service is None:
            from modules.analysis.service import AnalysisService
            self._analysis_service = AnalysisService(caller=self.model_caller)
        return self._analysis_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._model_caller = None
        self._analysis_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    The next call to get_container() creates a fresh container.
    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions


def get_analysis_service() -> "IAnalysisService":
    """FastAPI dependency for the analysis service."""
    return get_container().analysis
