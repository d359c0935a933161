"""
Application Services

Queue orchestration for the playback device, the per-device operation
queue it runs on, and event subscribers.
"""

from group_jukebox.application.services.device_queue import DeviceOperationQueue, PhaseResult
from group_jukebox.application.services.orchestration_models import (
    BatchOrchestrationRequest,
    OrchestrationMode,
    OrchestrationOutcome,
    OrchestrationRequest,
    OrchestrationStatus,
)
from group_jukebox.application.services.queue_orchestrator import QueueOrchestrator
from group_jukebox.application.services.region_warning import RegionWarningNotifier

__all__ = [
    "QueueOrchestrator",
    "DeviceOperationQueue",
    "PhaseResult",
    "OrchestrationMode",
    "OrchestrationStatus",
    "OrchestrationRequest",
    "BatchOrchestrationRequest",
    "OrchestrationOutcome",
    "RegionWarningNotifier",
]
