"""Feature platforms of neo-identity."""
