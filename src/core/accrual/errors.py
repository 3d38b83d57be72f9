"""Exception types for the accrual ledger.

Each domain rejection has a stable ``code`` that matches the ``rejection``
string carried by a rejected ``StepResult``. ``step_or_raise()`` and the
stateful ledger use ``error_for_code()`` to turn a rejection into an exception.
"""

from __future__ import annotations


class AccrualError(Exception):
    """Base class for every ledger rejection."""

    code: str = "accrual_error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)


class InvalidVaultIdentity(AccrualError):
    code = "invalid_vault_identity"


class InvalidStakeMultiple(AccrualError):
    code = "invalid_stake_multiple"


class NonPositiveBid(AccrualError):
    code = "non_positive_bid"


class NonPositivePeriod(AccrualError):
    code = "non_positive_period"


class VaultAlreadyActive(AccrualError):
    code = "vault_already_active"


class VaultNotActive(AccrualError):
    code = "vault_not_active"


class PeriodAlreadyEnded(AccrualError):
    """Periodic claim attempted at or after ``end_time``; use the final claim."""

    code = "period_already_ended"


class PeriodNotYetEnded(AccrualError):
    code = "period_not_yet_ended"


class NoRewardsAvailable(AccrualError):
    code = "no_rewards_available"


class FundsTransferFailed(AccrualError):
    code = "funds_transfer_failed"


class Unauthorized(AccrualError):
    code = "unauthorized"


class ReentrantCall(AccrualError):
    """Raised when a mutating call arrives while another is still in flight."""

    code = "reentrant_call"


class ClockRegression(AccrualError):
    code = "clock_regression"


class AccrualInvariantError(AccrualError):
    """Raised when a post-state violates one or more invariants."""

    code = "invariant"

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")


_BY_CODE: dict[str, type[AccrualError]] = {
    cls.code: cls
    for cls in (
        InvalidVaultIdentity,
        InvalidStakeMultiple,
        NonPositiveBid,
        NonPositivePeriod,
        VaultAlreadyActive,
        VaultNotActive,
        PeriodAlreadyEnded,
        PeriodNotYetEnded,
        NoRewardsAvailable,
        FundsTransferFailed,
        Unauthorized,
        ReentrantCall,
        ClockRegression,
    )
}


def error_for_code(rejection: str) -> AccrualError:
    """Build the exception matching a ``StepResult.rejection`` string."""
    if rejection.startswith("invariant:"):
        return AccrualInvariantError(rejection.removeprefix("invariant:").split(","))
    cls = _BY_CODE.get(rejection)
    if cls is None:
        return AccrualError(rejection)
    return cls()
