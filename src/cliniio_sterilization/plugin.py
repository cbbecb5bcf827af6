"""Litestar plugin for the sterilization workflow.

This module provides the SterilizationPlugin, which injects one
SterilizationOrchestrator into a Litestar application and optionally
registers the REST API.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from litestar.di import Provide
from litestar.plugins import InitPluginProtocol

from cliniio_sterilization.engine.orchestrator import SterilizationOrchestrator

if TYPE_CHECKING:
    from litestar.config.app import AppConfig

    from cliniio_sterilization.core.types import WorkflowPhase

__all__ = ["SterilizationPlugin", "SterilizationPluginConfig"]


@dataclass
class SterilizationPluginConfig:
    """Configuration for the SterilizationPlugin.

    Attributes:
        orchestrator: Optional pre-configured orchestrator. If not provided,
            a new one is created using ``phase_durations``.
        dependency_key: The key used for dependency injection of the
            orchestrator. Defaults to "orchestrator". The API controllers
            always receive it as "orchestrator".
        enable_api: Whether to enable the REST API endpoints. Defaults to True.
        api_path_prefix: URL path prefix for all sterilization API endpoints.
            Defaults to "/sterilization".
        api_guards: List of Litestar guards to apply to all API endpoints.
        api_tags: OpenAPI tags to apply to API endpoints.
        include_api_in_schema: Whether to include API endpoints in OpenAPI schema.
            Defaults to True.
        phase_durations: Planned duration, in seconds, per phase. Only used
            when the plugin builds the orchestrator.
    """

    orchestrator: SterilizationOrchestrator | None = None
    dependency_key: str = "orchestrator"
    enable_api: bool = True
    api_path_prefix: str = "/sterilization"
    api_guards: list[Any] = field(default_factory=list)
    api_tags: list[str] = field(default_factory=lambda: ["Sterilization"])
    include_api_in_schema: bool = True
    phase_durations: dict[WorkflowPhase, int] = field(default_factory=dict)


class SterilizationPlugin(InitPluginProtocol):
    """Litestar plugin for sterilization workflow management.

    Example:
        Using the injected orchestrator in a route handler::

            from litestar import get
            from cliniio_sterilization import SterilizationOrchestrator


            @get("/cycle")
            async def current_cycle(orchestrator: SterilizationOrchestrator) -> dict:
                return orchestrator.workflow.to_dict()
    """

    __slots__ = ("_config", "_orchestrator")

    def __init__(self, config: SterilizationPluginConfig | None = None) -> None:
        """Initialize the plugin.

        Args:
            config: Optional configuration for the plugin.
        """
        self._config = config or SterilizationPluginConfig()
        self._orchestrator: SterilizationOrchestrator | None = None

    @property
    def orchestrator(self) -> SterilizationOrchestrator:
        """Get the orchestrator.

        Raises:
            RuntimeError: If accessed before plugin initialization.
        """
        if self._orchestrator is None:
            msg = "SterilizationPlugin has not been initialized. Access orchestrator after app startup."
            raise RuntimeError(msg)
        return self._orchestrator

    def on_app_init(self, app_config: AppConfig) -> AppConfig:
        """Initialize the plugin when the Litestar app starts.

        This method:
        1. Creates or uses the provided orchestrator
        2. Adds the orchestrator provider to the app config
        3. Optionally registers REST API controllers if enable_api=True

        Args:
            app_config: The Litestar application configuration.

        Returns:
            The modified application configuration.
        """
        self._orchestrator = self._config.orchestrator or SterilizationOrchestrator(
            phase_durations=self._config.phase_durations,
        )

        def provide_orchestrator() -> SterilizationOrchestrator:
            return self._orchestrator  # type: ignore[return-value]

        app_config.dependencies[self._config.dependency_key] = Provide(
            provide_orchestrator,
            sync_to_thread=False,
        )

        if self._config.enable_api:
            from litestar import Router

            from cliniio_sterilization.exceptions import SterilizationError
            from cliniio_sterilization.web.controllers import (
                BatchCodeController,
                BatchController,
                PackagingSessionController,
                WorkflowController,
            )
            from cliniio_sterilization.web.exceptions import sterilization_error_handler

            # Controllers resolve "orchestrator"; one provider callable may back only one key.
            router_dependencies: dict[str, Provide] = {}
            if self._config.dependency_key != "orchestrator":

                def provide_controller_orchestrator() -> SterilizationOrchestrator:
                    return self._orchestrator  # type: ignore[return-value]

                router_dependencies["orchestrator"] = Provide(provide_controller_orchestrator, sync_to_thread=False)

            router = Router(
                path=self._config.api_path_prefix,
                route_handlers=[
                    PackagingSessionController,
                    BatchController,
                    BatchCodeController,
                    WorkflowController,
                ],
                dependencies=router_dependencies,
                guards=self._config.api_guards,
                tags=self._config.api_tags,
                include_in_schema=self._config.include_api_in_schema,
            )
            app_config.route_handlers.append(router)
            app_config.exception_handlers[SterilizationError] = sterilization_error_handler  # type: ignore[assignment]

        return app_config
