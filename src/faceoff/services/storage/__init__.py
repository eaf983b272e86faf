from .profile_repository import ProfileMutation, ProfileRepository
from .store import create_store_engine, open_profile_repository

__all__ = [
    "ProfileMutation",
    "ProfileRepository",
    "create_store_engine",
    "open_profile_repository",
]
