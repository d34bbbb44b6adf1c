"""Core building blocks for neo-identity: exceptions, entity identity, events."""
