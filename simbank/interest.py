"""
Interest Engine Module

Credits simple interest on the cash balance at the configured rate. There
is no accrual schedule: each request posts one period of interest.
"""

from dataclasses import dataclass

from .transactions import LedgerOperation, TransactionType


@dataclass(frozen=True)
class InterestPosting:
    """Result of an interest credit"""
    rate: float
    interest: float
    balance: float


class InterestEngine(LedgerOperation):
    """Posts interest to the active account"""

    logger_name = "simbank.interest"

    def add_interest(self) -> InterestPosting:
        """
        Credit balance * rate to the balance

        No PIN check and no frequency limit. A negative balance yields
        negative interest.
        """
        account = self.session.current_account()
        rate = self.config.interest_rate
        interest = account.balance * rate
        account.balance += interest

        self._commit(account, TransactionType.INTEREST_CREDIT,
                     f"Interest of {interest:.2f} credited at {rate:.1%}",
                     extra={"rate": rate, "interest": interest, "balance": account.balance})
        return InterestPosting(rate=rate, interest=interest, balance=account.balance)
