"""Chitchat - direct messaging backend with REST history and Socket.IO delivery"""

__version__ = "0.1.0"

__all__ = ["__version__"]
