"""Root configuration model and its accessors."""

import json
import logging
import os
from typing import Any, Dict, List, Optional

import httpx
from pydantic import Field, PrivateAttr, TypeAdapter, field_validator

from .domain import (
    ComponentConfigs,
    DatabaseConfig,
    FileModel,
    LoggingConfig,
    ServiceConfig,
    index_by_name,
)
from .errors import DatabaseNotFoundError, ServiceNotFoundError

logger = logging.getLogger(__name__)

_service_list = TypeAdapter(List[ServiceConfig])
_database_list = TypeAdapter(List[DatabaseConfig])


class Config(FileModel):
    """Configuration settings read from a JSON config file.

    API specific values belong in ``options`` rather than new fields.
    """
    env: str = Field(default="", alias="Env")
    port: int = Field(default=0, alias="Port", strict=True)
    logging: LoggingConfig = Field(default_factory=LoggingConfig, alias="Logging")
    # Defaults for every service; services override them per component
    default_component_configs: ComponentConfigs = Field(
        default_factory=ComponentConfigs, alias="DefaultComponentConfigs"
    )
    service_configs: Dict[str, ServiceConfig] = Field(default_factory=dict, alias="ServiceConfigs")
    database_configs: Dict[str, DatabaseConfig] = Field(default_factory=dict, alias="DatabaseConfigs")
    options: Dict[str, Any] = Field(default_factory=dict, alias="Options")
    # Fingerprint of the file backing this config
    hash: str = Field(default="", alias="Hash")

    _default_http_client: Optional[httpx.Client] = PrivateAttr(default=None)

    @field_validator("service_configs", mode="before")
    @classmethod
    def _index_services(cls, value: Any) -> Any:
        return index_by_name(_service_list, value)

    @field_validator("database_configs", mode="before")
    @classmethod
    def _index_databases(cls, value: Any) -> Any:
        return index_by_name(_database_list, value)

    @field_validator("options", mode="before")
    @classmethod
    def _null_options(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def default_http_client(self) -> Optional[httpx.Client]:
        """Client built from the default component configs, without service overrides.

        Services should use their own ``ServiceConfig.http_client``.
        """
        return self._default_http_client

    def get_service_config(self, name: str) -> ServiceConfig:
        service = self.service_configs.get(name)
        if service is None:
            raise ServiceNotFoundError(name)
        return service

    def get_database_config(self, name: str) -> DatabaseConfig:
        """Get a database config by name, resolving its password from the environment."""
        database = self.database_configs.get(name)
        if database is None:
            raise DatabaseNotFoundError(name)

        if database.auth_required:
            database.password = os.getenv(database.auth_environment_variable, "")
            if not database.password:
                logger.warning(
                    f"Password variable '{database.auth_environment_variable}' is empty for database '{name}'"
                )
        return database

    def is_local(self) -> bool:
        return self.env.lower() == "local"

    def option_as_string(self, option: str) -> str:
        """Fetch an entry of ``options`` rendered as a string.

        Missing options render as an empty string.
        """
        value = self.options.get(option)
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (dict, list)):
            return json.dumps(value)
        return str(value)

    def close(self) -> None:
        """Close the default client and every service client."""
        if self._default_http_client is not None:
            self._default_http_client.close()
        for service in self.service_configs.values():
            if service.http_client is not None:
                service.http_client.close()
