"""
Atelier Signals.

All communication with external systems happens via signals.
Signals are sent inside the operation's transaction: a handler that
raises rolls the whole operation back.

Signals:
    order_created: Order persisted and its materials debited
    line_completed: Material line completed, output costed and stocked
    order_completed: Last pending line completed
"""

from django.dispatch import Signal

# Order created - materials already debited
# Args: order, user
order_created = Signal()

# Line completed - output credited (when actual > 0)
# Args: order, consumption, output, allocation, user
line_completed = Signal()

# Order completed - no pending lines left
# Args: order, user
order_completed = Signal()

__all__ = ["order_created", "line_completed", "order_completed"]
