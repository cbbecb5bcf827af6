"""Database persistence layer for cliniio-sterilization.

This module provides SQLAlchemy models, repositories and an async adapter
for storing batches, audit trails, packaging sessions and batch code history.

Requires the [db] extra:
    pip install cliniio-sterilization[db]
"""

from __future__ import annotations

from cliniio_sterilization.db.models import (
    BatchAuditEventModel,
    BatchCodeGenerationModel,
    PackagingSessionModel,
    SterilizationBatchModel,
)
from cliniio_sterilization.db.persistence import SterilizationPersistence
from cliniio_sterilization.db.repositories import (
    BatchAuditEventRepository,
    BatchCodeGenerationRepository,
    PackagingSessionRepository,
    SterilizationBatchRepository,
)

__all__ = [
    "BatchAuditEventModel",
    "BatchAuditEventRepository",
    "BatchCodeGenerationModel",
    "BatchCodeGenerationRepository",
    "PackagingSessionModel",
    "PackagingSessionRepository",
    "SterilizationBatchModel",
    "SterilizationBatchRepository",
    "SterilizationPersistence",
]
