"""
IntelHub Backend
Access management (users, roles, capabilities, sessions) for a threat-intelligence platform
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
