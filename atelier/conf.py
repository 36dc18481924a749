"""
Atelier Settings.

Supports two formats (dict takes priority):

    # Option 1: Dict
    ATELIER = {
        "DEFAULT_OVERHEAD_RATE": Decimal("0.10"),
        "ARTISAN_LEDGER_BACKEND": "myproject.payroll.ArtisanLedger",
    }

    # Option 2: Flat
    ATELIER_DEFAULT_OVERHEAD_RATE = Decimal("0.10")
    ATELIER_ARTISAN_LEDGER_BACKEND = "myproject.payroll.ArtisanLedger"

All settings have sensible defaults, so no configuration is required.
"""

import threading
from decimal import Decimal

from django.conf import settings


# ── Defaults ──

DEFAULTS = {
    "DEFAULT_OVERHEAD_RATE": Decimal("0.10"),
    "ORDER_CODE_PREFIX": "MO",
    "ARTISAN_LEDGER_BACKEND": "atelier.adapters.noop.NoopArtisanLedger",
    "ACCRUE_LABOR_ON_COMPLETION": True,
}


# ── Accessors ──

_sentinel = object()


def get_setting(name, default=_sentinel):
    """
    Get an atelier setting.

    Looks up in order:
    1. ATELIER dict (e.g. ATELIER = {"ORDER_CODE_PREFIX": "..."})
    2. Flat setting (e.g. ATELIER_ORDER_CODE_PREFIX = "...")
    3. DEFAULTS
    """
    atelier_dict = getattr(settings, "ATELIER", {})
    if name in atelier_dict:
        return atelier_dict[name]

    flat_value = getattr(settings, f"ATELIER_{name}", _sentinel)
    if flat_value is not _sentinel:
        return flat_value

    if default is not _sentinel:
        return default

    return DEFAULTS.get(name)


def get_default_overhead_rate() -> Decimal:
    """Overhead rate for service types created without one."""
    return Decimal(str(get_setting("DEFAULT_OVERHEAD_RATE")))


_ledger_backend_lock = threading.Lock()
_ledger_backend_instance = None


def get_artisan_ledger_backend():
    """
    Return the configured artisan ledger backend instance, or None.

    The artisan ledger owns artisan balances and payments. Atelier only
    reports labor earned on completed production lines.
    """
    global _ledger_backend_instance

    path = get_setting("ARTISAN_LEDGER_BACKEND")
    if not path:
        return None

    if _ledger_backend_instance is None:
        with _ledger_backend_lock:
            if _ledger_backend_instance is None:  # double-checked
                from django.utils.module_loading import import_string

                _ledger_backend_instance = import_string(path)()

    return _ledger_backend_instance


def reset_artisan_ledger_backend() -> None:
    """Reset singleton (for tests)."""
    global _ledger_backend_instance
    _ledger_backend_instance = None
