"""Domain types and rules for rates (no storage or HTTP concerns)."""
