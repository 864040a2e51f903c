"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class SimBankConfig(BaseSettings):
    """SimBank configuration"""

    # Persistence configuration
    data_file: str = "accounts.dat"

    # Registry configuration
    max_accounts: int = 100
    min_pin: int = 1000
    max_pin: int = 9999

    # Business rules configuration
    starting_balance: float = 1000.0
    loan_amount: float = 500.0
    asset_purchase_amount: float = 100.0
    interest_rate: float = 0.05

    # Market defaults
    crypto_price: float = 150.0
    gold_price: float = 60.0
    silver_price: float = 25.0
    eur_rate: float = 1.10
    gbp_rate: float = 1.27
    inr_rate: float = 0.012
    market_seed: Optional[int] = None  # Set for reproducible market refreshes

    # API configuration
    api_host: str = "127.0.0.1"
    api_port: int = 8090

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text

    class Config:
        env_prefix = "SIMBANK_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = SimBankConfig()


def get_config() -> SimBankConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> SimBankConfig:
    """Reload configuration from environment"""
    global config
    config = SimBankConfig()
    return config
