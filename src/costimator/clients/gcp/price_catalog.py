# src/costimator/clients/gcp/price_catalog.py
"""GCP Cloud Billing catalog client resolving CPU, memory and storage unit prices."""

from typing import Any, Dict, Iterable, Optional
import structlog
from google.api_core import exceptions as google_exceptions
from google.cloud import billing_v1
from google.oauth2 import service_account

from costimator.config.settings import GCE_BILLING_SERVICE
from costimator.core.base_client import BaseClient
from costimator.core.exceptions import ClientConnectionException, PriceLookupException
from costimator.core.utils import retry_with_backoff
from costimator.estimation.pricing import StaticPriceCatalog
from costimator.models.resource_models import MachineFamily, WorkloadResourceConfig

logger = structlog.get_logger(__name__)

CPU_PREFIXES = {
    MachineFamily.N1.value: "N1 Predefined Instance Core",
    MachineFamily.N2.value: "N2 Instance Core",
    MachineFamily.E2.value: "E2 Instance Core",
    MachineFamily.N2D.value: "N2D AMD Custom Instance Core",
}

MEMORY_PREFIXES = {
    MachineFamily.N1.value: "N1 Predefined Instance Ram",
    MachineFamily.N2.value: "N2 Instance Ram",
    MachineFamily.E2.value: "E2 Instance Ram",
    MachineFamily.N2D.value: "N2D AMD Instance Ram",
}

PD_STANDARD_PREFIX = "Regional Storage PD Capacity"

HOURS_PER_MONTH = 24 * 31
BYTES_PER_GIB = 1024 * 1024 * 1024

TRANSIENT_ERRORS = (
    google_exceptions.ServerError,
    google_exceptions.TooManyRequests,
)


def sku_matches(sku: Any, prefix: str, region: str) -> bool:
    """SKU description starts with prefix and the SKU is sold in region."""
    if not prefix or not sku.description.startswith(prefix):
        return False
    return any(r.lower() == region.lower() for r in sku.service_regions)


def calculate_monthly_price(pricing_info: Any) -> float:
    """Monthly USD price of one unit (core or byte) from a SKU pricing info."""
    expression = pricing_info.pricing_expression
    unit_price = expression.tiered_rates[0].unit_price
    price = float(unit_price.units) + float(unit_price.nanos) / 1000000000.0

    unit = expression.usage_unit
    if unit == "h":
        # 1 vCPU core per hour
        return price * HOURS_PER_MONTH
    if unit == "GiBy.h":
        # 1 byte per hour
        return price / BYTES_PER_GIB * HOURS_PER_MONTH
    if unit == "GiBy.mo":
        # 1 byte per month
        return price / BYTES_PER_GIB
    raise PriceLookupException(f"Price UsageUnit Not implemented: {unit}", details={"unit": unit})


def retrieve_prices(skus: Iterable[Any], resource_config: WorkloadResourceConfig) -> StaticPriceCatalog:
    """Pick the CPU, memory and standard PD SKUs of the configured machine family and region."""
    family = resource_config.machine_family
    region = resource_config.region
    cpu_prefix = CPU_PREFIXES.get(family, "")
    memory_prefix = MEMORY_PREFIXES.get(family, "")

    cpu_info = memory_info = pd_info = None
    for sku in skus:
        if cpu_info is not None and memory_info is not None and pd_info is not None:
            break
        if cpu_info is None and sku_matches(sku, cpu_prefix, region):
            cpu_info = sku.pricing_info[0]
        elif memory_info is None and sku_matches(sku, memory_prefix, region):
            memory_info = sku.pricing_info[0]
        elif pd_info is None and sku_matches(sku, PD_STANDARD_PREFIX, region):
            pd_info = sku.pricing_info[0]

    missing = [name for name, info in (("cpu", cpu_info), ("memory", memory_info), ("pd_standard", pd_info))
               if info is None]
    if missing:
        raise PriceLookupException(
            f"Couldn't find all Price Infos for machine family {family} in region {region}",
            details={"missing": missing, "machine_family": family, "region": region}
        )

    return StaticPriceCatalog(
        cpu_price=calculate_monthly_price(cpu_info),
        memory_price=calculate_monthly_price(memory_info),
        pd_standard_price=calculate_monthly_price(pd_info),
    )


class GCPPriceCatalogClient(BaseClient):
    """Cloud Billing Catalog client for Compute Engine prices."""

    def __init__(self, config: Dict[str, Any], resource_config: WorkloadResourceConfig,
                 credentials_path: Optional[str] = None, client: Optional[Any] = None):
        super().__init__(config, "CloudBilling")
        self.resource_config = resource_config
        self.credentials_path = credentials_path
        self.billing_service = config.get("billing_service", GCE_BILLING_SERVICE)
        self._client = client

    async def connect(self) -> None:
        """Create the Cloud Catalog client."""
        if self._client is not None:
            self._connected = True
            return
        try:
            if self.credentials_path:
                credentials = service_account.Credentials.from_service_account_file(self.credentials_path)
                self._client = billing_v1.CloudCatalogClient(credentials=credentials)
                self.logger.info(f"Loaded billing credentials from {self.credentials_path}")
            else:
                self._client = billing_v1.CloudCatalogClient()
                self.logger.info("Using application default credentials for billing catalog")
            self._connected = True
        except Exception as e:
            raise ClientConnectionException(self.service, f"Connection failed: {e}")

    async def disconnect(self) -> None:
        """Release the Cloud Catalog client."""
        self._client = None
        self._connected = False
        self.logger.info("Cloud Billing client disconnected")

    async def health_check(self) -> bool:
        """Check Cloud Billing client health."""
        try:
            if not self._connected or not self._client:
                return False
            await self._call(lambda: next(iter(self._client.list_services()), None))
            return True
        except Exception as e:
            self.logger.warning("Cloud Billing health check failed", error=str(e))
            return False

    def _retrieve(self) -> StaticPriceCatalog:
        skus = self._client.list_skus(parent=self.billing_service)
        return retrieve_prices(skus, self.resource_config)

    @retry_with_backoff(max_retries=3, retry_on=TRANSIENT_ERRORS)
    async def fetch_price_catalog(self) -> StaticPriceCatalog:
        """Resolve the monthly unit prices of the configured machine family and region."""
        self._require_connection()

        self.logger.info(
            "Retrieving prices from billing catalog",
            machine_family=self.resource_config.machine_family,
            region=self.resource_config.region
        )
        try:
            catalog = await self._call(self._retrieve)
        except google_exceptions.GoogleAPICallError as e:
            if isinstance(e, TRANSIENT_ERRORS):
                raise
            raise PriceLookupException(f"Billing catalog request failed: {e}")

        self.logger.info(
            "Prices retrieved",
            cpu=catalog.cpu_monthly_price(),
            memory=catalog.memory_monthly_price(),
            pd_standard=catalog.pd_standard_monthly_price()
        )
        return catalog
