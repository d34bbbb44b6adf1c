"""Identity & access platform.

Layered as ``core`` (value objects, entities, events, protocols),
``application`` (managers) and ``infrastructure`` (adapters).
"""
