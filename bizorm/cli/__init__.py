"""
bizorm CLI - inspection tool for model registries.

Usage:
    bizorm inspect myapp.models
    bizorm inspect myapp.models:registry --json
    bizorm fields myapp.models Partner
    bizorm check myapp.models
"""

from .. import __version__

__cli_name__ = "bizorm"
