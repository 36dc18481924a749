"""
Atelier Protocols.

Defines interfaces for external integrations.
"""

from atelier.protocols.artisan import ArtisanLedgerBackend, LaborAccrual

__all__ = [
    # Artisan ledger Protocol
    "ArtisanLedgerBackend",
    "LaborAccrual",
]
