"""
Artisan Ledger Protocol: interface for artisan balances and payments.

Atelier defines this protocol. The payroll/treasury system implements it
to receive the labor earned by artisans on completed production lines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class LaborAccrual:
    """Labor earned by an artisan for one completed material line."""

    artisan_code: str
    amount: Decimal
    date: date
    reference: str
    description: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class ArtisanLedgerBackend(Protocol):
    """
    Protocol for the artisan balance ledger.

    Implementations should add ``accrual.amount`` to the artisan's
    balance (a debit owed to the artisan) and record the movement.
    """

    def accrue(self, artisan, accrual: LaborAccrual) -> None:
        """
        Record labor owed to an artisan.

        Args:
            artisan: Artisan instance
            accrual: Amount, date and order reference
        """
        ...
