"""Identity domain events.

``IdentityEvent`` is the closed set of events raised by this package;
consumers match on the concrete class.
"""

from typing import Union

from .permission_changed import PermissionChanged, PermissionChangeType
from .role_created import RoleCreated
from .role_updated import RoleUpdated
from .session_expired import SessionExpired
from .user_logged_in import UserLoggedIn
from .user_registered import UserRegistered

IdentityEvent = Union[
    PermissionChanged,
    RoleCreated,
    RoleUpdated,
    SessionExpired,
    UserLoggedIn,
    UserRegistered,
]

# Events after which a cached effective-permission set is stale
AUTHORIZATION_EVENTS = (PermissionChanged, RoleCreated, RoleUpdated)

__all__ = [
    "IdentityEvent",
    "AUTHORIZATION_EVENTS",
    "PermissionChanged",
    "PermissionChangeType",
    "RoleCreated",
    "RoleUpdated",
    "SessionExpired",
    "UserLoggedIn",
    "UserRegistered",
]
