"""
Utility functions and classes for PlanetForge.
"""

from .config import Configuration, configure_logging
from .visualization import Visualizer

__all__ = ['Configuration', 'configure_logging', 'Visualizer']
