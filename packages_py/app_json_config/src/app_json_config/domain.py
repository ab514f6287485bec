"""
Data models for the JSON application config.

Field aliases follow the PascalCase keys of the config file. Unknown keys are
rejected in the top level sections so typos fail the load. Service, database
and endpoint entries ignore keys they do not know.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, TypeAdapter, field_validator
from pydantic.fields import FieldInfo

from .flags import ConfigFlag, Flag

TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")

_LEVEL_NAMES = {
    "trace": TRACE_LEVEL,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "panic": logging.CRITICAL,
}


class FileModel(BaseModel):
    """Base for every model decoded from the config file."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class EntryModel(BaseModel):
    """Base for list entries of the config file, which ignore unknown keys."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


def _model_type(field: FieldInfo) -> Any:
    annotation = field.annotation
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    return None


def drop_unknown_keys(model: Any, value: Any) -> Any:
    """Strip keys ``model`` does not declare from ``value``, recursing into nested models."""
    if not isinstance(value, dict):
        return value
    known = {}
    for name, field in model.model_fields.items():
        nested = _model_type(field)
        for key in {name, field.alias or name}:
            if key in value:
                known[key] = drop_unknown_keys(nested, value[key]) if nested else value[key]
    return known


def index_by_name(adapter: TypeAdapter, value: Any) -> Any:
    """Parse a list of named entries into a mapping keyed by name.

    Later entries silently replace earlier ones with the same name.
    """
    if value is None:
        return {}
    if not isinstance(value, list):
        return value
    return {item.name: item for item in adapter.validate_python(value)}


class LoggingConfig(FileModel):
    level: str = Field(default="", alias="Level")

    def log_level(self) -> int:
        """Stdlib logging level for the configured level name.

        The loader does not configure logging itself; callers pass this to
        ``logging.basicConfig`` or ``Logger.setLevel``. Unknown names map to INFO.
        """
        return _LEVEL_NAMES.get(self.level.strip().lower(), logging.INFO)


class ServiceLoggingConfig(FileModel):
    """Logging switches a service can override."""
    log_call_duration: Flag = Field(default=ConfigFlag.UNSET, alias="LogCallDuration")


class ClientConfig(FileModel):
    """HTTP client settings a service can override.

    Timeouts are whole seconds. Zero (or UNSET for flags, "" for the bundle
    path) means "not given" and is filled from the defaults during the merge.
    """
    timeout: int = Field(default=0, alias="Timeout", strict=True)
    idle_conn_timeout: int = Field(default=0, alias="IdleConnTimeout", strict=True)
    max_idle_conns_per_host: int = Field(default=0, alias="MaxIdleConnsPerHost", strict=True)
    max_conns_per_host: int = Field(default=0, alias="MaxConnsPerHost", strict=True)
    max_retries: int = Field(default=0, alias="MaxRetries", strict=True)
    disable_compression: Flag = Field(default=ConfigFlag.UNSET, alias="DisableCompression")
    insecure_skip_verify: Flag = Field(default=ConfigFlag.UNSET, alias="InsecureSkipVerify")
    ca_bundle_path: str = Field(default="", alias="CABundlePath")


class ComponentConfigs(FileModel):
    """Component settings configured by default and overridden per service."""
    service_logging: ServiceLoggingConfig = Field(default_factory=ServiceLoggingConfig, alias="ServiceLogging")
    client: ClientConfig = Field(default_factory=ClientConfig, alias="Client")


class AuthCredentials(EntryModel):
    key_component1: str = Field(default="", alias="KeyComponent1")
    key_component2: str = Field(default="", alias="KeyComponent2")
    euuid: str = Field(default="", alias="Euuid")


class EndpointConfig(EntryModel):
    name: str = Field(default="", alias="Name")
    path: str = Field(default="", alias="Path")


_endpoint_list = TypeAdapter(List[EndpointConfig])


class ServiceConfig(EntryModel):
    """Everything required to connect to a service and its endpoints.

    ``merged_component_configs`` and ``http_client`` are filled in while the
    config is loaded and are read-only afterwards.
    """
    name: str = Field(default="", alias="Name")
    url: str = Field(default="", alias="Url")
    auth_required: bool = Field(default=False, alias="AuthRequired", strict=True)
    auth_environment_variable: str = Field(default="", alias="AuthEnvironmentVariable")
    auth_credentials: AuthCredentials = Field(default_factory=AuthCredentials, alias="AuthCredentials")
    auth_key: str = Field(default="", alias="AuthKey")
    endpoints: Dict[str, EndpointConfig] = Field(default_factory=dict, alias="Endpoints")
    component_config_overrides: ComponentConfigs = Field(
        default_factory=ComponentConfigs, alias="ComponentConfigOverrides"
    )

    _merged_component_configs: ComponentConfigs = PrivateAttr(default_factory=ComponentConfigs)
    _http_client: Optional[httpx.Client] = PrivateAttr(default=None)

    @field_validator("endpoints", mode="before")
    @classmethod
    def _index_endpoints(cls, value: Any) -> Any:
        return index_by_name(_endpoint_list, value)

    @field_validator("component_config_overrides", mode="before")
    @classmethod
    def _lenient_overrides(cls, value: Any) -> Any:
        return drop_unknown_keys(ComponentConfigs, value)

    @property
    def merged_component_configs(self) -> ComponentConfigs:
        return self._merged_component_configs

    @property
    def http_client(self) -> Optional[httpx.Client]:
        return self._http_client


class DatabaseConfig(EntryModel):
    """Connection details for a database.

    ``password`` stays empty until the config is looked up through
    ``Config.get_database_config``.
    """
    name: str = Field(default="", alias="Name")
    database: str = Field(default="", alias="Database")
    server: str = Field(default="", alias="Server")
    username: str = Field(default="", alias="Username")
    password: str = Field(default="", alias="Password")
    auth_required: bool = Field(default=False, alias="AuthRequired", strict=True)
    auth_environment_variable: str = Field(default="", alias="AuthEnvironmentVariable")
