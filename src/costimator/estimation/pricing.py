"""Price catalog interface consumed by the estimator."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union
from pydantic import BaseModel, ConfigDict, Field, ValidationError
import yaml

from costimator.core.exceptions import PriceLookupException


class PriceCatalog(ABC):
    """Monthly USD unit rates."""

    @abstractmethod
    def cpu_monthly_price(self) -> float:
        """Monthly price of one vCPU core."""
        pass

    @abstractmethod
    def memory_monthly_price(self) -> float:
        """Monthly price of one byte of memory."""
        pass

    @abstractmethod
    def pd_standard_monthly_price(self) -> float:
        """Monthly price of one byte of standard persistent disk."""
        pass


class CatalogPrices(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    cpu_price: float = Field(..., ge=0, alias="cpuMonthlyPrice")
    memory_price: float = Field(..., ge=0, alias="memoryMonthlyPrice")
    pd_standard_price: float = Field(..., ge=0, alias="pdStandardMonthlyPrice")


class StaticPriceCatalog(PriceCatalog):
    """Price catalog holding already resolved rates."""

    def __init__(self, cpu_price: float, memory_price: float, pd_standard_price: float = 0.0):
        self.prices = CatalogPrices(
            cpu_price=cpu_price,
            memory_price=memory_price,
            pd_standard_price=pd_standard_price,
        )

    def cpu_monthly_price(self) -> float:
        return self.prices.cpu_price

    def memory_monthly_price(self) -> float:
        return self.prices.memory_price

    def pd_standard_monthly_price(self) -> float:
        return self.prices.pd_standard_price

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "StaticPriceCatalog":
        """Load rates from a YAML file with cpuMonthlyPrice, memoryMonthlyPrice and pdStandardMonthlyPrice."""
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}
            prices = CatalogPrices.model_validate(data)
        except (OSError, yaml.YAMLError, ValidationError) as e:
            raise PriceLookupException(f"Unable to load price catalog from {path}: {e}")
        return cls(prices.cpu_price, prices.memory_price, prices.pd_standard_price)

    def __repr__(self) -> str:
        return f"StaticPriceCatalog({self.prices!r})"
