"""Authoritative multiplayer snake server."""

__all__ = [
    "collision",
    "constants",
    "food",
    "main",
    "protocol",
    "registry",
    "scheduler",
    "snake",
    "utils",
    "world",
]
