import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from ledger import Ledger


class TestLedger:
    def setup_method(self):
        self.ledger = Ledger()

    def test_creates_zeroed_account_on_first_reference(self):
        account = self.ledger.get_or_create_account(5)
        assert account.client_id == 5
        assert account.total == 0
        assert 5 in self.ledger
        assert len(self.ledger) == 1

    def test_returns_same_account(self):
        first = self.ledger.get_or_create_account(1)
        first.credit(100)
        second = self.ledger.get_or_create_account(1)
        assert second is first
        assert second.available == 100

    def test_get_account_does_not_create(self):
        assert self.ledger.get_account(3) is None
        assert 3 not in self.ledger
        assert len(self.ledger) == 0

    def test_snapshot_in_first_seen_order(self):
        for client_id in (3, 1, 2):
            self.ledger.get_or_create_account(client_id)

        assert [account.client_id for account in self.ledger.snapshot()] == [3, 1, 2]

    def test_snapshot_is_detached(self):
        account = self.ledger.get_or_create_account(1)
        snapshot = self.ledger.snapshot()
        account.credit(50)
        assert snapshot[0].available == 0
