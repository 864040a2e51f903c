"""
Loan endpoints
"""

from fastapi import APIRouter, Depends

from .deps import get_bank, http_error
from .schemas import LoanRequest
from ..bank import Bank
from ..errors import BankingError
from ..loans import LoanOutcome


router = APIRouter()


def _outcome_response(outcome: LoanOutcome) -> dict:
    return {
        "action": outcome.action.value,
        "amount": outcome.amount,
        "loan": outcome.loan,
        "balance": outcome.balance
    }


@router.post("")
async def manage_loan(
    request: LoanRequest,
    bank: Bank = Depends(get_bank)
):
    """Take a loan if none is outstanding, otherwise repay it"""
    try:
        outcome = bank.manage_loan(request.pin, request.confirm)
    except BankingError as e:
        raise http_error(e)
    return _outcome_response(outcome)


@router.post("/take")
async def take_loan(
    request: LoanRequest,
    bank: Bank = Depends(get_bank)
):
    """Take the fixed loan"""
    try:
        outcome = bank.take_loan(request.pin, request.confirm)
    except BankingError as e:
        raise http_error(e)
    return _outcome_response(outcome)


@router.post("/repay")
async def repay_loan(
    request: LoanRequest,
    bank: Bank = Depends(get_bank)
):
    """Repay the outstanding loan in full"""
    try:
        outcome = bank.repay_loan(request.pin, request.confirm)
    except BankingError as e:
        raise http_error(e)
    return _outcome_response(outcome)
