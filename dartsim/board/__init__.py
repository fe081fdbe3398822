"""
Board module - dartboard geometry and point scoring.
"""
from .geometry import DartboardMapper

__all__ = [
    "DartboardMapper",
]
