"""
Application configuration
Read from environment variables / .env; hotel branding and tax defaults live here
"""
from decimal import Decimal
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Front Office PMS"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./pms.db"

    # Hotel branding (printed on invoices and GRCs)
    HOTEL_NAME: str = "Hotel Sharda Palace"
    HOTEL_ADDRESS: str = "Vrindavan, Mathura, Uttar Pradesh, India - 281121"
    HOTEL_PHONE: str = "+91 98765 43210"
    HOTEL_EMAIL: str = "info@shardapalace.com"
    HOTEL_GSTIN: str = "XXGSTIN1234567XX"

    # Document numbering
    INVOICE_PREFIX: str = "INV"
    GRC_PREFIX: str = "GRC"

    # Tax defaults, used to seed tax_config and when a rate row is missing
    DEFAULT_CGST_RATE: Decimal = Decimal("6.00")
    DEFAULT_SGST_RATE: Decimal = Decimal("6.00")

    CURRENCY_SYMBOL: str = "₹"

    model_config = ConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


# Global settings instance
settings = Settings()
