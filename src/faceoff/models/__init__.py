from .profile import Category, Profile, ProfileFilter, new_sampling_key

__all__ = ["Category", "Profile", "ProfileFilter", "new_sampling_key"]
