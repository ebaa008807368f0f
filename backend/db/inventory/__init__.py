"""
Stock on hand across locations.

Models:
- InventoryLine (quantity of a product at a location, optionally per lot)
- Transaction (append-only movements that update inventory lines)
"""
