"""
Loads a config file and prepares it for use.

Load order: open the file, decode it, merge the component configs of every
service, build the HTTP clients, then fetch the service auth keys. Every step
but the last stops at its first error.
"""
import hashlib
import logging
import os
from abc import ABC, abstractmethod
from enum import Enum
from typing import BinaryIO, Callable, List, Optional, Tuple

import httpx
from pydantic import ValidationError

from .auth_keys import AuthKeyGetter, EnvironmentKeyGetter, load_service_auth_keys
from .certs import BundleMap, load_ca_bundle, resolve_ca_path
from .client_factory import RetryClientBuilderFn, build_retry_client, create_http_client
from .core import Config
from .domain import ClientConfig
from .errors import ConfigError, DecodeError, FileOpenError
from .fingerprint import ContentHash, get_content_hash
from .merge import merge_component_configs_for_all_services

logger = logging.getLogger(__name__)

ENV_APP_CONFIG_PATH = "APP_CONFIG_PATH"
DEFAULT_CONFIG_PATH = "config.json"

ClientFromConfigFn = Callable[[ClientConfig], httpx.Client]


class LoadState(str, Enum):
    UNLOADED = "unloaded"
    FILE_OPENED = "file_opened"
    PARSED = "parsed"
    MERGED = "merged"
    CLIENTS_BUILT = "clients_built"
    AUTH_KEYS_LOADED = "auth_keys_loaded"


class ConfigBuilder(ABC):
    """Steps used by ``new_config`` to assemble a Config."""

    state: LoadState = LoadState.UNLOADED

    @abstractmethod
    def load(self, path: str) -> BinaryIO:
        pass

    @abstractmethod
    def read(self, config_data: BinaryIO) -> None:
        pass

    @abstractmethod
    def init_client_fn(self, retry_client_builder: RetryClientBuilderFn) -> ClientFromConfigFn:
        pass

    @abstractmethod
    def load_service_auth_keys(self, key_getter: AuthKeyGetter, client: Optional[httpx.Client]) -> List[ConfigError]:
        pass

    @abstractmethod
    def get_config(self) -> Optional[Config]:
        pass

    @abstractmethod
    def get_config_path(self) -> str:
        pass


def build_initial_config(raw: bytes) -> Config:
    """Decode the raw file and stamp it with the MD5 of its bytes."""
    try:
        config = Config.model_validate_json(raw)
    except ValidationError as e:
        raise DecodeError("Error decoding config data", e) from e
    config.hash = hashlib.md5(raw).hexdigest()
    return config


class DefaultConfigBuilder(ConfigBuilder):
    def __init__(self, content_hash: Optional[ContentHash] = None):
        self.config: Optional[Config] = None
        self.config_path = ""
        self.content_hash = content_hash or get_content_hash()
        self.state = LoadState.UNLOADED

    def get_config(self) -> Optional[Config]:
        return self.config

    def get_config_path(self) -> str:
        return self.config_path

    def load(self, path: str) -> BinaryIO:
        logger.debug(f"Loading config file: {path}")
        self.config_path = path
        try:
            config_file = open(path, "rb")
        except OSError as e:
            raise FileOpenError(f"Error opening config file {path}", e) from e
        self.state = LoadState.FILE_OPENED
        return config_file

    def read(self, config_data: BinaryIO) -> None:
        """Decode the config data and merge each service's overrides with the defaults."""
        logger.debug("Reading config data")
        try:
            raw = config_data.read()
        except OSError as e:
            raise DecodeError("Error reading config data", e) from e

        config = build_initial_config(raw)
        self.state = LoadState.PARSED

        merge_component_configs_for_all_services(config)
        self.state = LoadState.MERGED

        self.content_hash.new_hash_code(config.hash)
        self.config = config

    def init_client_fn(self, retry_client_builder: RetryClientBuilderFn) -> ClientFromConfigFn:
        """Load every CA bundle in use and return a function building clients from merged client configs."""
        config = self.config
        if config is None:
            raise ConfigError("config must be read before clients can be built")

        cert_pools: BundleMap = {}
        default_client_config = config.default_component_configs.client
        load_ca_bundle(
            cert_pools,
            resolve_ca_path(self.config_path, default_client_config.ca_bundle_path),
            default_client_config.ca_bundle_path,
        )

        for service in config.service_configs.values():
            ca_bundle_path = service.merged_component_configs.client.ca_bundle_path
            load_ca_bundle(cert_pools, resolve_ca_path(self.config_path, ca_bundle_path), ca_bundle_path)

        def build_client(client_config: ClientConfig) -> httpx.Client:
            return create_http_client(client_config, cert_pools, retry_client_builder)

        return build_client

    def load_service_auth_keys(self, key_getter: AuthKeyGetter, client: Optional[httpx.Client]) -> List[ConfigError]:
        services = self.config.service_configs if self.config is not None else {}
        errors = load_service_auth_keys(services, key_getter, client)
        self.state = LoadState.AUTH_KEYS_LOADED
        return errors


def new_config(
    builder: ConfigBuilder,
    retry_client_builder: RetryClientBuilderFn,
    config_path: str,
    key_getter: Optional[AuthKeyGetter] = None,
) -> Tuple[Optional[Config], List[ConfigError]]:
    """Run the load sequence with ``builder``.

    Returns ``(None, [error])`` when a step fails, otherwise the config and
    the (possibly empty) list of auth key errors.
    """
    try:
        config_file = builder.load(config_path)
    except ConfigError as e:
        return None, [e]

    with config_file:
        try:
            builder.read(config_file)
        except ConfigError as e:
            return None, [e]

    try:
        build_client = builder.init_client_fn(retry_client_builder)
    except ConfigError as e:
        return None, [e]

    config = builder.get_config()
    if config is None:
        return None, [ConfigError(f"No config was read from {config_path}")]
    config._default_http_client = build_client(config.default_component_configs.client)

    for service in config.service_configs.values():
        logger.info(
            f"ServiceName: {service.name} MergedComponentConfigs: "
            f"{service.merged_component_configs.model_dump(mode='json', by_alias=True)}"
        )

    for service in config.service_configs.values():
        service._http_client = build_client(service.merged_component_configs.client)
    builder.state = LoadState.CLIENTS_BUILT

    errors = builder.load_service_auth_keys(key_getter or EnvironmentKeyGetter(), config.default_http_client)

    logger.info(
        f"Config loaded from {builder.get_config_path()}: {len(config.service_configs)} services, "
        f"{len(config.database_configs)} databases, {len(errors)} auth key errors"
    )
    return config, errors


def load_config(
    config_path: Optional[str] = None,
    key_getter: Optional[AuthKeyGetter] = None,
) -> Tuple[Optional[Config], List[ConfigError]]:
    """Load a config file.

    The path falls back to ``APP_CONFIG_PATH`` and then ``config.json``.
    """
    path = config_path or os.getenv(ENV_APP_CONFIG_PATH) or DEFAULT_CONFIG_PATH
    return new_config(DefaultConfigBuilder(), build_retry_client, path, key_getter)
