"""Fungible asset protocols — collateral assets and the pegged token."""
from typing import Protocol


class FungibleAsset(Protocol):
    """Standard transfer/approve semantics; callers pass their identity explicitly."""

    @property
    def address(self) -> str: ...

    def balance_of(self, account: str) -> int: ...

    def allowance(self, owner: str, spender: str) -> int: ...

    def approve(self, owner: str, spender: str, amount: int) -> bool: ...

    def transfer(self, sender: str, recipient: str, amount: int) -> bool: ...

    def transfer_from(
        self, spender: str, sender: str, recipient: str, amount: int
    ) -> bool: ...


class PeggedToken(FungibleAsset, Protocol):
    """Burnable/mintable token whose supply only its owner may change."""

    def mint(self, caller: str, to: str, amount: int) -> bool: ...

    def burn(self, caller: str, amount: int) -> None: ...
