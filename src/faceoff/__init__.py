"""Faceoff.

Vote between two randomly dealt profiles and rank them by win rate.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
