"""
Market and status endpoints
"""

from fastapi import APIRouter, Depends

from .deps import get_bank, http_error
from .schemas import MarketUpdateModel, PricesModel, RatesModel, ValuationModel
from ..bank import Bank
from ..errors import BankingError


router = APIRouter()


@router.get("/market/prices", response_model=PricesModel)
async def get_prices(bank: Bank = Depends(get_bank)):
    """Current asset unit prices"""
    return PricesModel.from_prices(bank.current_prices())


@router.get("/market/rates", response_model=RatesModel)
async def get_rates(bank: Bank = Depends(get_bank)):
    """Current exchange rates to USD"""
    return RatesModel.from_rates(bank.current_rates())


@router.post("/market/refresh", response_model=MarketUpdateModel)
async def refresh_market(bank: Bank = Depends(get_bank)):
    """Move asset prices by a random percentage"""
    return MarketUpdateModel.from_update(bank.refresh_prices())


@router.get("/status", response_model=ValuationModel)
async def get_status(bank: Bank = Depends(get_bank)):
    """Valuation and net worth of the active account"""
    try:
        valuation = bank.valuation()
    except BankingError as e:
        raise http_error(e)
    return ValuationModel.from_valuation(valuation)
