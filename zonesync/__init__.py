"""zonesync - declarative DNS zone management for OVH."""

__version__ = "0.1.0"
