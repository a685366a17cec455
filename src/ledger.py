from typing import Dict, List, Optional

from models import AccountSnapshot, ClientAccount


class Ledger:
    """
    Owns every client account, keyed by client id.
    Accounts are created on first reference and never removed.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        account = self._accounts.get(client_id)
        if account is None:
            account = ClientAccount(client_id=client_id)
            self._accounts[client_id] = account
        return account

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def snapshot(self) -> List[AccountSnapshot]:
        """Return an immutable view of all accounts, in the order clients were first seen."""
        return [account.snapshot() for account in self._accounts.values()]

    def __contains__(self, client_id: int) -> bool:
        return client_id in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)
