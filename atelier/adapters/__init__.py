"""
Atelier Adapters.

Implementations of protocols for external systems.
"""

from atelier.adapters.noop import NoopArtisanLedger

__all__ = [
    "NoopArtisanLedger",
]
