"""
Registration and login endpoints
"""

from fastapi import APIRouter, Depends, status

from .deps import get_bank, http_error
from .schemas import AccountModel, CredentialsRequest
from ..bank import Bank
from ..errors import BankingError


router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: CredentialsRequest,
    bank: Bank = Depends(get_bank)
):
    """Create a new account"""
    try:
        account = bank.create_account(request.name, request.pin)
    except BankingError as e:
        raise http_error(e)

    return {
        "account": AccountModel.from_account(account).model_dump(),
        "message": "Account created successfully"
    }


@router.post("/login")
async def login(
    request: CredentialsRequest,
    bank: Bank = Depends(get_bank)
):
    """Log in with name and PIN"""
    try:
        account = bank.login(request.name, request.pin)
    except BankingError as e:
        raise http_error(e)

    return {
        "account": AccountModel.from_account(account).model_dump(),
        "message": f"Welcome, {account.name}!"
    }


@router.post("/logout")
async def logout(bank: Bank = Depends(get_bank)):
    """Log out the active account"""
    bank.logout()
    return {"message": "Logged out"}


@router.get("")
async def get_session(bank: Bank = Depends(get_bank)):
    """Get the session state and active account, if any"""
    account = None
    if bank.session.is_authenticated:
        account = AccountModel.from_account(bank.current_account()).model_dump()

    return {"state": bank.session.state.value, "account": account}
