"""Engine ledgers: collateral and debt per user."""
from .collateral_vault import CollateralVault
from .debt_ledger import DebtLedger

__all__ = ["CollateralVault", "DebtLedger"]
