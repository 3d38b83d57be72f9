"""
Funds custody for the accrual ledger
"""

from .custody import CUSTODY_HOLDER, CustodyTable

__all__ = [
    "CUSTODY_HOLDER",
    "CustodyTable",
]
