"""neo-identity: multi-tenant identity and access core.

Users, roles, permissions, sessions and one-time passcodes scoped by
organization, with domain events and repository ports.
"""

from .__version__ import __version__

__all__ = ["__version__"]
