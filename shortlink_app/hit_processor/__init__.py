"""
Background visit processing.
"""

from .dispatcher import VisitDispatcher, DispatchMode

__all__ = ["VisitDispatcher", "DispatchMode"]
