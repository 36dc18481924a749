"""
Atelier REST API.

Provides DRF ViewSets for:
- StockLine (read-only)
- ProductionOrder (list, create, retrieve + completion actions)
"""
