"""
Single-asset custody table backing the ledger's funds transfers.

Implements CustodyTable[Holder] -> Amount plus one custody account that holds
every bid pulled at registration until it is pushed back out as rewards.
"""

from typing import Dict


# Type aliases
Holder = str
Amount = int  # Non-negative integer (arbitrary precision)

# Reserved holder id for the custody pool itself
CUSTODY_HOLDER = "custody"


class CustodyTable:
    """
    Balance table mapping holder -> amount with a distinguished custody holder.

    ``pull``/``push`` never raise on insufficient funds; they report failure
    with ``False`` and leave every balance untouched, which is the contract
    the accrual ledger expects from its funds-transfer collaborator.
    """

    def __init__(self, custody_holder: Holder = CUSTODY_HOLDER):
        """Initialize an empty table."""
        self.custody_holder = custody_holder
        self._balances: Dict[Holder, Amount] = {}

    def get(self, holder: Holder) -> Amount:
        """Get balance for holder. Returns 0 if not found."""
        return self._balances.get(holder, 0)

    def set(self, holder: Holder, amount: Amount) -> None:
        """
        Set balance for holder.

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            # Remove zero balances to keep table sparse
            self._balances.pop(holder, None)
        else:
            self._balances[holder] = amount

    def credit(self, holder: Holder, amount: Amount) -> None:
        """Mint ``amount`` to ``holder`` (funding outside the ledger)."""
        if amount < 0:
            raise ValueError(f"Credit must be non-negative: {amount}")
        self.set(holder, self.get(holder) + amount)

    @property
    def custody_balance(self) -> Amount:
        return self.get(self.custody_holder)

    def _move(self, source: Holder, dest: Holder, amount: Amount) -> bool:
        if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
            return False
        if self.get(source) < amount:
            return False
        self.set(source, self.get(source) - amount)
        self.set(dest, self.get(dest) + amount)
        return True

    def pull(self, source: Holder, amount: Amount) -> bool:
        """Move ``amount`` from ``source`` into custody."""
        return self._move(source, self.custody_holder, amount)

    def push(self, dest: Holder, amount: Amount) -> bool:
        """Move ``amount`` out of custody to ``dest``."""
        return self._move(self.custody_holder, dest, amount)

    def total_supply(self) -> Amount:
        return sum(self._balances.values())

    def get_all_balances(self) -> Dict[Holder, Amount]:
        """Get all balances as a dictionary."""
        return dict(self._balances)

    def __repr__(self) -> str:
        return f"CustodyTable({len(self._balances)} entries, custody={self.custody_balance})"
