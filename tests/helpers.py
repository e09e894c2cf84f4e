from team_inventory import schemas


def make_item(store, product_name="Helmet", quantity=10, **overrides):
    """Helper: add an item to ``store`` and return it."""
    return store.add(schemas.InventoryItemCreate(product_name=product_name, quantity=quantity, **overrides))
