"""
Noop Artisan Ledger -- accepts accruals and does nothing.

Use this adapter for development or testing when no payroll system
is connected.

Configuration:
    ATELIER = {
        "ARTISAN_LEDGER_BACKEND": "atelier.adapters.noop.NoopArtisanLedger",
    }
"""

from __future__ import annotations

import logging

from atelier.protocols.artisan import LaborAccrual

logger = logging.getLogger(__name__)


class NoopArtisanLedger:
    """
    No-operation implementation of the ArtisanLedgerBackend protocol.

    Logs the accrual at DEBUG level and discards it.
    """

    def accrue(self, artisan, accrual: LaborAccrual) -> None:
        logger.debug(
            f"Noop artisan ledger: {accrual.amount} for {accrual.artisan_code}",
            extra={"artisan": accrual.artisan_code, "reference": accrual.reference},
        )
