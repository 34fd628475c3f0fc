"""
Storage Layer.

This package handles everything that touches the user's filesystem beyond
scratch files: the configuration file and the final placement of downloads.
"""

from .config_manager import ConfigManager
from .placement import place

__all__ = ["ConfigManager", "place"]
