# accounts/models.py

from dataclasses import dataclass
from typing import Optional

from core.core_models import ROLES, UserProfile

# Session keys shared by the login flow and the role gate
SESSION_AUTHENTICATED = "authenticated"
SESSION_ROLE = "user_role"
SESSION_USERNAME = "username"
SESSION_TOKEN = "api_token"
SESSION_PROFILE = "user_profile"


@dataclass
class SessionUser:
    """
    The logged-in account as kept in the signed-cookie session.
    No local storage: the auth service owns the real record.
    """
    token: str
    role: str
    username: str
    profile: Optional[UserProfile] = None

    @property
    def id(self):
        return self.profile.id if self.profile else None

    @classmethod
    def from_session(cls, session):
        if not session.get(SESSION_AUTHENTICATED) or not session.get(SESSION_TOKEN):
            return None
        profile_data = session.get(SESSION_PROFILE)
        return cls(
            token=session[SESSION_TOKEN],
            role=session.get(SESSION_ROLE, ""),
            username=session.get(SESSION_USERNAME, ""),
            profile=UserProfile.from_dict(profile_data) if profile_data else None,
        )


def store_session_user(request, token, profile):
    """Write token, profile and role into a fresh session."""
    request.session.cycle_key()
    request.session[SESSION_AUTHENTICATED] = True
    request.session[SESSION_TOKEN] = token
    request.session[SESSION_ROLE] = profile.role
    request.session[SESSION_USERNAME] = profile.fullName or profile.email
    request.session[SESSION_PROFILE] = profile.to_dict()


def refresh_session_profile(request, profile):
    request.session[SESSION_ROLE] = profile.role
    request.session[SESSION_USERNAME] = profile.fullName or profile.email
    request.session[SESSION_PROFILE] = profile.to_dict()


def is_known_role(role):
    return role in ROLES
