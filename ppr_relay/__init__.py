"""
PPR Form Relay

Receives prior-permission-required (PPR) form submissions over HTTP,
renders them into an HTML table, and relays them by email to a fixed
destination address.
"""

__version__ = "1.0.0"

# Package metadata
__all__ = [
    "__version__",
]
