"""User storage module."""
from .store import User, UserStore, hash_password, verify_password

__all__ = ["User", "UserStore", "hash_password", "verify_password"]
