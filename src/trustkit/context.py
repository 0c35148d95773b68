"""Execution context: the selected operator/account and their stores."""

from __future__ import annotations

from pathlib import Path

from trustkit.crypto.keys import KeyPair, Role
from trustkit.errors import AmbiguousScopeError, ClaimDecodeError, StoreError
from trustkit.prompts import Prompter
from trustkit.store import EntityStore, KeyStore, list_operators


class StoreContext:
    def __init__(
        self,
        *,
        store_dir: str | Path,
        keys_dir: str | Path,
        operator: str | None = None,
        account: str | None = None,
    ) -> None:
        self.store_dir = Path(store_dir)
        self.keystore = KeyStore(keys_dir)
        self._operator = operator or None
        self._account = account or None

    def list_operators(self) -> list[str]:
        return list_operators(self.store_dir)

    @property
    def operator_name(self) -> str:
        """Configured or picked operator, else the only operator in the store, else ''."""
        if self._operator:
            return self._operator
        operators = self.list_operators()
        if len(operators) == 1:
            return operators[0]
        return ""

    def operator_store(self, name: str | None = None) -> EntityStore:
        operator = name or self.operator_name
        if not operator:
            raise AmbiguousScopeError(kind="operator", count=len(self.list_operators()))
        return EntityStore(self.store_dir / operator)

    def pick_operator(self, name: str, prompter: Prompter) -> str:
        """Select the operator later lookups (accounts, default keys) run against."""
        if not name:
            operators = self.list_operators()
            if not operators:
                return ""
            if len(operators) == 1:
                name = operators[0]
            else:
                name = operators[prompter.select("select operator", operators)]
        self._operator = name
        return name

    def _current_store(self) -> EntityStore | None:
        operator = self.operator_name
        if not operator:
            return None
        store = EntityStore(self.store_dir / operator)
        return store if store.exists() else None

    def list_accounts(self) -> list[str]:
        store = self._current_store()
        return store.list_accounts() if store is not None else []

    @property
    def account_name(self) -> str:
        """Configured account if it exists, else the only account, else ''."""
        accounts = self.list_accounts()
        if self._account and self._account in accounts:
            return self._account
        if len(accounts) == 1:
            return accounts[0]
        return ""

    def pick_account(self, name: str, prompter: Prompter) -> str:
        if not name:
            accounts = self.list_accounts()
            if not accounts:
                return ""
            if len(accounts) == 1:
                name = accounts[0]
            else:
                default = accounts.index(self.account_name) if self.account_name in accounts else 0
                name = accounts[prompter.select("select account", accounts, default=default)]
        self._account = name
        return name

    def default_key(self, role: Role, scope: str | None = None) -> KeyPair | None:
        """Signing key of the named (or current) operator/account, if stored."""
        store = self._current_store()
        if store is None:
            return None
        if role is Role.OPERATOR:
            name = scope or store.operator_name
        elif role is Role.ACCOUNT:
            name = scope or self.account_name
        else:
            return None
        if not name or not store.has_claim(role, name):
            return None
        try:
            claim = store.read_claim(role, name)
        except ClaimDecodeError as exc:
            raise StoreError(f"{role.value} {name!r} has an unreadable claim: {exc}") from exc
        return self.keystore.get(claim.sub)
