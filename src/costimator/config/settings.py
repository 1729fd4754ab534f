# config/settings.py
from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Any, Dict, Optional, Union
from enum import Enum
import structlog
import yaml
from dotenv import load_dotenv

from costimator.core.exceptions import ConfigurationException
from costimator.models.resource_models import MachineFamily, WorkloadResourceConfig

# Load .env file explicitly
load_dotenv()

logger = structlog.get_logger(__name__)

GCE_BILLING_SERVICE = "services/6F81-5844-456A"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class ResourceConf(BaseModel):
    """Resource defaults overrides. None means not provided."""

    model_config = ConfigDict(populate_by_name=True)

    machine_family: Optional[MachineFamily] = Field(None, alias="machineFamily")
    region: Optional[str] = Field(None, alias="region")
    default_cpu_millicores: Optional[int] = Field(None, alias="defaultCPUinMillis")
    default_memory_bytes: Optional[int] = Field(None, alias="defaultMemoryinBytes")
    unbounded_limit_buffer_percent: Optional[int] = Field(
        None, alias="percentageIncreaseForUnboundedRerouces"
    )
    default_storage_bytes: Optional[int] = Field(None, alias="defaultStorageinBytes")


class ClusterConf(BaseModel):
    """Cluster defaults overrides. None means not provided."""

    model_config = ConfigDict(populate_by_name=True)

    nodes_count: Optional[int] = Field(None, alias="nodesCount")


class CostimatorConfig(BaseModel):
    """Caller supplied overrides for defaults not provided in manifests."""

    model_config = ConfigDict(populate_by_name=True)

    resource_conf: ResourceConf = Field(default_factory=ResourceConf, alias="resourceConf")
    cluster_conf: ClusterConf = Field(default_factory=ClusterConf, alias="clusterConf")

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "CostimatorConfig":
        """Load overrides from a YAML file using the camelCase keys."""
        config_path = Path(path)
        try:
            with open(config_path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationException(f"Unable to read config file {config_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigurationException(f"Config file {config_path} must contain a mapping")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationException(
                f"Invalid config file {config_path}", details={"errors": e.errors()}
            )


class ResourceSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="COSTIMATOR_RESOURCE_")

    machine_family: Optional[MachineFamily] = Field(None, description="GCE machine family used for prices")
    region: Optional[str] = Field(None, description="GCP region used for prices")
    default_cpu_millicores: Optional[int] = Field(None, description="CPU request when none is declared")
    default_memory_bytes: Optional[int] = Field(None, description="Memory request when none is declared")
    unbounded_limit_buffer_percent: Optional[int] = Field(
        None, description="Percentage added to requests for unbounded limits"
    )
    default_storage_bytes: Optional[int] = Field(None, description="Storage when a claim declares none")


class ClusterSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="COSTIMATOR_CLUSTER_")

    nodes_count: Optional[int] = Field(None, description="Nodes used to estimate DaemonSets")
    kubeconfig_path: Optional[str] = Field(None, description="Path to kubeconfig file")
    context: Optional[str] = Field(None, description="Kubernetes context to use")


class GCPSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="GCP_")

    credentials_path: Optional[str] = Field(None, description="Service account JSON for the billing catalog")
    billing_service: str = Field(GCE_BILLING_SERVICE, description="Cloud Billing service holding GCE SKUs")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    environment: Environment = Field(Environment.DEVELOPMENT, description="Environment")
    debug: bool = Field(False, description="Debug mode")
    log_level: LogLevel = Field(LogLevel.INFO, description="Log level")
    log_format: str = Field("text", description="Log format (json or text)")

    resource: ResourceSettings = Field(default_factory=lambda: ResourceSettings())
    cluster: ClusterSettings = Field(default_factory=lambda: ClusterSettings())
    gcp: GCPSettings = Field(default_factory=lambda: GCPSettings())

    @field_validator('environment', mode='before')
    @classmethod
    def validate_environment(cls, v):
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    @classmethod
    def create_from_env(cls) -> "Settings":
        """Create settings instance from environment variables."""
        return cls()

    def to_costimator_config(self) -> CostimatorConfig:
        """Overrides coming from the environment."""
        return CostimatorConfig(
            resource_conf=ResourceConf(**self.resource.model_dump()),
            cluster_conf=ClusterConf(nodes_count=self.cluster.nodes_count),
        )


def _overridable_values(conf: CostimatorConfig) -> Dict[str, Any]:
    values = conf.resource_conf.model_dump()
    values.update(conf.cluster_conf.model_dump())
    return values


def resolve_resource_config(*overrides: Optional[CostimatorConfig]) -> WorkloadResourceConfig:
    """Merge overrides, in order, onto the built-in defaults.

    A field overrides the default only when it is provided and non-zero /
    non-empty: zero or empty values never replace a default.
    """
    resolved = WorkloadResourceConfig().model_dump()

    for conf in overrides:
        if conf is None:
            continue
        for field, value in _overridable_values(conf).items():
            if value is None:
                continue
            if value == 0 or value == "":
                logger.warning("Ignoring zero or empty config override", field=field)
                continue
            resolved[field] = value

    return WorkloadResourceConfig(**resolved)

