"""
Transaction endpoints
"""

from fastapi import APIRouter, Depends

from .deps import get_bank, http_error
from .schemas import ConvertRequest, DepositRequest, PurchaseAssetRequest, WithdrawRequest
from ..bank import Bank
from ..errors import BankingError


router = APIRouter()


@router.post("/deposit")
async def deposit(
    request: DepositRequest,
    bank: Bank = Depends(get_bank)
):
    """Make a deposit"""
    try:
        result = bank.deposit(request.amount)
    except BankingError as e:
        raise http_error(e)

    return {
        "transaction_type": result.transaction_type.value,
        "amount": result.amount,
        "balance": result.balance,
        "message": "Deposit processed successfully"
    }


@router.post("/withdraw")
async def withdraw(
    request: WithdrawRequest,
    bank: Bank = Depends(get_bank)
):
    """Make a withdrawal"""
    try:
        result = bank.withdraw(request.amount, request.pin)
    except BankingError as e:
        raise http_error(e)

    return {
        "transaction_type": result.transaction_type.value,
        "amount": result.amount,
        "balance": result.balance,
        "message": "Withdrawal processed successfully"
    }


@router.post("/assets/purchase")
async def purchase_asset(
    request: PurchaseAssetRequest,
    bank: Bank = Depends(get_bank)
):
    """Spend the fixed purchase amount on an asset"""
    try:
        result = bank.purchase_asset(request.asset, request.pin)
    except BankingError as e:
        raise http_error(e)

    return {
        "asset": result.asset.value,
        "amount": result.amount,
        "unit_price": result.unit_price,
        "units": result.units,
        "holding": result.holding,
        "balance": result.balance
    }


@router.post("/convert/to-foreign")
async def convert_to_foreign(
    request: ConvertRequest,
    bank: Bank = Depends(get_bank)
):
    """Convert USD into a foreign currency"""
    try:
        result = bank.convert_to_foreign(request.currency, request.amount)
    except BankingError as e:
        raise http_error(e)

    return _conversion_response(result)


@router.post("/convert/to-usd")
async def convert_to_usd(
    request: ConvertRequest,
    bank: Bank = Depends(get_bank)
):
    """Convert a foreign currency back into USD"""
    try:
        result = bank.convert_to_usd(request.currency, request.amount)
    except BankingError as e:
        raise http_error(e)

    return _conversion_response(result)


@router.post("/interest")
async def add_interest(bank: Bank = Depends(get_bank)):
    """Credit one period of interest"""
    try:
        result = bank.add_interest()
    except BankingError as e:
        raise http_error(e)

    return {"rate": result.rate, "interest": result.interest, "balance": result.balance}


def _conversion_response(result) -> dict:
    return {
        "transaction_type": result.transaction_type.value,
        "currency": result.currency.code,
        "amount": result.amount,
        "converted": result.converted,
        "holding": result.holding,
        "balance": result.balance
    }
