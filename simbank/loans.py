"""
Loan Module

A single fixed-amount loan per account: granted in full on confirmation,
repaid in full only, and never accruing interest.
"""

from dataclasses import dataclass
from enum import Enum

from .errors import InsufficientFundsError, InvalidInputError
from .transactions import LedgerOperation, TransactionType


class LoanAction(Enum):
    """What a loan request ended up doing"""
    GRANTED = "granted"
    REPAID = "repaid"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class LoanOutcome:
    """Result of a loan request"""
    action: LoanAction
    amount: float   # Amount granted or repaid, 0 when cancelled
    loan: float     # Outstanding loan afterwards
    balance: float


class LoanManager(LedgerOperation):
    """Takes and repays the active account's loan"""

    logger_name = "simbank.loans"

    def manage_loan(self, pin: int, confirm: bool) -> LoanOutcome:
        """
        Grant a loan if none is outstanding, otherwise repay the current one

        Raises:
            InvalidCredentialError: If the PIN does not match
            InsufficientFundsError: If a repayment is due but the balance cannot cover it
        """
        account = self.session.verify_pin(pin)
        if account.has_loan:
            return self._repay(account, confirm)
        return self._grant(account, confirm)

    def take_loan(self, pin: int, confirm: bool = True) -> LoanOutcome:
        """
        Grant the fixed loan amount

        Raises:
            InvalidCredentialError: If the PIN does not match
            InvalidInputError: If a loan is already outstanding
        """
        account = self.session.verify_pin(pin)
        if account.has_loan:
            self._reject(account, TransactionType.LOAN_DISBURSEMENT,
                         InvalidInputError("A loan is already outstanding"))
        return self._grant(account, confirm)

    def repay_loan(self, pin: int, confirm: bool = True) -> LoanOutcome:
        """
        Repay the outstanding loan in full

        Raises:
            InvalidCredentialError: If the PIN does not match
            InvalidInputError: If there is no loan to repay
            InsufficientFundsError: If the balance is below the loan
        """
        account = self.session.verify_pin(pin)
        if not account.has_loan:
            self._reject(account, TransactionType.LOAN_REPAYMENT,
                         InvalidInputError("There is no outstanding loan"))
        return self._repay(account, confirm)

    def _grant(self, account, confirm: bool) -> LoanOutcome:
        if not confirm:
            self.logger.info("Loan request cancelled")
            return LoanOutcome(LoanAction.CANCELLED, 0.0, account.loan, account.balance)

        amount = self.config.loan_amount
        account.loan = amount
        account.balance += amount

        self._commit(account, TransactionType.LOAN_DISBURSEMENT,
                     f"Loan of {amount:.2f} approved",
                     extra={"loan": account.loan, "balance": account.balance})
        return LoanOutcome(LoanAction.GRANTED, amount, account.loan, account.balance)

    def _repay(self, account, confirm: bool) -> LoanOutcome:
        if account.balance < account.loan:
            self._reject(account, TransactionType.LOAN_REPAYMENT,
                         InsufficientFundsError(account.loan, account.balance))

        if not confirm:
            self.logger.info("Loan repayment cancelled")
            return LoanOutcome(LoanAction.CANCELLED, 0.0, account.loan, account.balance)

        amount = account.loan
        account.balance -= amount
        account.loan = 0.0

        self._commit(account, TransactionType.LOAN_REPAYMENT,
                     f"Loan of {amount:.2f} fully repaid",
                     extra={"loan": account.loan, "balance": account.balance})
        return LoanOutcome(LoanAction.REPAID, amount, account.loan, account.balance)
