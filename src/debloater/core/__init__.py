"""Core services: controller, command scheduler, runtime loop."""

from debloater.core.runtime import Runtime
from debloater.core.scheduler import CommandScheduler

__all__ = [
    "CommandScheduler",
    "Runtime",
]
