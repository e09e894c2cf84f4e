"""
Team equipment inventory: items, players, and the checkout ledger between them.
"""
