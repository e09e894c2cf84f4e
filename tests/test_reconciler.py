"""Tests for bulk roster reconciliation."""

from team_inventory import schemas

from .helpers import make_item


def roster(*players):
    """Helper: build a ParsedRoster from (name, [(product, qty), ...]) tuples."""
    return schemas.ParsedRoster(players=[
        schemas.RosterPlayer(
            name=name,
            assigned_items=[schemas.RosterItem(product_name=p, quantity=q) for p, q in lines],
        )
        for name, lines in players
    ])


class TestRoundTrip:
    def test_single_player_single_line(self, reconciler, inventory_store, player_store, ledger):
        helmet = make_item(inventory_store, "Helmet", 10)

        report = reconciler.reconcile(roster(("Bob", [("Helmet", 3)])))

        assert [p.name for p in player_store.list()] == ["Bob"]
        assert len(ledger) == 1
        assert ledger.list()[0].quantity == 3
        assert helmet.quantity == 7
        assert report.issues == []
        assert report.ok
        assert report.players_created == 1
        assert report.assignments_created == 1

    def test_product_match_ignores_case(self, reconciler, inventory_store, ledger):
        helmet = make_item(inventory_store, "Helmet", 10)

        report = reconciler.reconcile(roster(("Bob", [("hELMET", 2)])))

        assert report.ok
        assert ledger.list()[0].inventory_id == helmet.id

    def test_jersey_number_is_kept(self, reconciler, player_store):
        reconciler.reconcile(schemas.ParsedRoster(players=[
            schemas.RosterPlayer(name="Bob", jersey_number=22),
        ]))
        assert player_store.list()[0].jersey_number == 22


class TestIssues:
    def test_over_demand(self, reconciler, inventory_store, ledger):
        helmet = make_item(inventory_store, "Helmet", 10)

        report = reconciler.reconcile(roster(("Bob", [("Helmet", 15)])))

        assert len(ledger) == 0
        assert len(report.issues) == 1
        issue = report.issues[0]
        assert issue.available == 10
        assert issue.requested == 15
        assert "Available: 10" in issue.message
        assert "Needed: 15" in issue.message
        assert helmet.quantity == 10
        assert not report.ok

    def test_unknown_item(self, reconciler, inventory_store):
        make_item(inventory_store, "Helmet", 10)

        report = reconciler.reconcile(roster(("Bob", [("Cleats", 1)])))

        assert [i.message for i in report.issues] == [
            'Item "Cleats" for player Bob not found in inventory.'
        ]

    def test_non_positive_quantity(self, reconciler, inventory_store, ledger):
        helmet = make_item(inventory_store, "Helmet", 10)

        report = reconciler.reconcile(roster(("Bob", [("Helmet", 0)])))

        assert len(report.issues) == 1
        assert len(ledger) == 0
        assert helmet.quantity == 10

    def test_blank_player_name_is_skipped(self, reconciler, inventory_store, player_store):
        make_item(inventory_store, "Helmet", 10)

        report = reconciler.reconcile(roster(("  ", [("Helmet", 1)]), ("Bob", [("Helmet", 1)])))

        assert [p.name for p in player_store.list()] == ["Bob"]
        assert len(report.issues) == 1
        assert report.assignments_created == 1

    def test_failed_line_is_not_rolled_back(self, reconciler, inventory_store, ledger):
        helmet = make_item(inventory_store, "Helmet", 10)
        pads = make_item(inventory_store, "Pads", 5)

        report = reconciler.reconcile(roster(
            ("Bob", [("Helmet", 2), ("Jersey", 1), ("Pads", 4)]),
        ))

        assert len(report.issues) == 1
        assert report.issues[0].product_name == "Jersey"
        assert len(ledger) == 2
        assert helmet.quantity == 8
        assert pads.quantity == 1


class TestRebuild:
    def test_reset_restores_previous_checkouts(self, reconciler, inventory_store, player_store, ledger):
        helmet = make_item(inventory_store, "Helmet", 10)
        old = player_store.add("Old Player")
        ledger.checkout(old.id, helmet.id, 6)

        report = reconciler.reconcile(roster(("Bob", [("Helmet", 10)])))

        assert report.ok
        assert [p.name for p in player_store.list()] == ["Bob"]
        assert helmet.quantity == 0
        assert all(a.player_id != old.id for a in ledger.list())

    def test_empty_roster_clears_everything(self, reconciler, inventory_store, player_store, ledger):
        helmet = make_item(inventory_store, "Helmet", 10)
        bob = player_store.add("Bob")
        ledger.checkout(bob.id, helmet.id, 6)

        report = reconciler.reconcile(schemas.ParsedRoster())

        assert report.ok
        assert len(player_store) == 0
        assert len(ledger) == 0
        assert helmet.quantity == 10

    def test_later_lines_compete_for_remaining_stock(self, reconciler, inventory_store, player_store, ledger):
        helmet = make_item(inventory_store, "Helmet", 10)

        report = reconciler.reconcile(roster(
            ("Alice", [("Helmet", 6)]),
            ("Bob", [("Helmet", 6)]),
            ("Carol", [("Helmet", 4)]),
        ))

        assert len(report.issues) == 1
        assert report.issues[0].player_name == "Bob"
        assert report.issues[0].available == 4
        assert helmet.quantity == 0
        holders = {h.player.name for h in ledger.assignments_for_item(helmet.id)}
        assert holders == {"Alice", "Carol"}

    def test_duplicate_names_collapse(self, reconciler, inventory_store, player_store, ledger):
        helmet = make_item(inventory_store, "Helmet", 10)

        report = reconciler.reconcile(roster(
            ("Bob", [("Helmet", 1)]),
            ("bob", [("Helmet", 2)]),
        ))

        assert len(player_store) == 1
        assert report.players_created == 1
        bob = player_store.list()[0]
        assert sum(h.assignment.quantity for h in ledger.assignments_for_player(bob.id)) == 3
        assert helmet.quantity == 7

    def test_reimport_is_idempotent(self, reconciler, inventory_store, player_store, ledger):
        helmet = make_item(inventory_store, "Helmet", 10)
        data = roster(("Bob", [("Helmet", 3)]), ("Alice", [("Helmet", 2)]))

        reconciler.reconcile(data)
        report = reconciler.reconcile(data)

        assert report.ok
        assert len(player_store) == 2
        assert len(ledger) == 2
        assert helmet.quantity == 5
