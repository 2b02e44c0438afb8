"""
Configuration subsystem for the session helper.

Modules:
- loader: Read and validate the per-user JSON configuration
"""

from .loader import ConfigLoader

__all__ = [
    "ConfigLoader",
]
