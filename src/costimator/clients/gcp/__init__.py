from .price_catalog import GCPPriceCatalogClient, calculate_monthly_price, retrieve_prices

__all__ = [
    "GCPPriceCatalogClient",
    "calculate_monthly_price",
    "retrieve_prices",
]
