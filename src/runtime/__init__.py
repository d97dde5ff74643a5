"""
Runtime wiring: shared context and loop supervision.
"""

from .context import RuntimeContext
from .supervisor import Supervisor

__all__ = ["RuntimeContext", "Supervisor"]
