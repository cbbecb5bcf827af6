"""Web layer for cliniio-sterilization.

This module provides the REST API controllers, DTOs, exception handler and
phase graph rendering. The API is registered automatically when using
SterilizationPlugin with enable_api=True (the default).

Example:
    Basic usage with SterilizationPlugin::

        from litestar import Litestar
        from cliniio_sterilization import SterilizationPlugin, SterilizationPluginConfig

        app = Litestar(
            plugins=[
                SterilizationPlugin(
                    config=SterilizationPluginConfig(api_path_prefix="/sterilization"),
                ),
            ],
        )

    With authentication guards::

        config = SterilizationPluginConfig(
            api_path_prefix="/api/v1/sterilization",
            api_guards=[require_auth_guard],
        )
"""

from __future__ import annotations

from cliniio_sterilization.web.controllers import (
    BatchCodeController,
    BatchController,
    PackagingSessionController,
    WorkflowController,
)
from cliniio_sterilization.web.dto import (
    BatchCodeDTO,
    BatchDTO,
    GraphDTO,
    PackagingSessionDTO,
    TransitionResultDTO,
    WorkflowDTO,
)
from cliniio_sterilization.web.exceptions import sterilization_error_handler
from cliniio_sterilization.web.graph import generate_phase_graph, parse_phase_graph_to_dict

__all__ = [
    "BatchCodeController",
    "BatchCodeDTO",
    "BatchController",
    "BatchDTO",
    "GraphDTO",
    "PackagingSessionController",
    "PackagingSessionDTO",
    "TransitionResultDTO",
    "WorkflowController",
    "WorkflowDTO",
    "generate_phase_graph",
    "parse_phase_graph_to_dict",
    "sterilization_error_handler",
]
