from .flags import ConfigFlag
from .domain import (
    LoggingConfig,
    ServiceLoggingConfig,
    ClientConfig,
    ComponentConfigs,
    AuthCredentials,
    EndpointConfig,
    ServiceConfig,
    DatabaseConfig,
    TRACE_LEVEL
)
from .core import Config
from .errors import (
    ConfigError,
    FileOpenError,
    DecodeError,
    MergeError,
    InvalidArgumentError,
    CertFileUnreadableError,
    CertParseError,
    AuthKeyEmptyError,
    AuthKeyRetrievalError,
    NotFoundError,
    ServiceNotFoundError,
    DatabaseNotFoundError
)
from .merge import merge_component_configs, merge_component_configs_for_all_services
from .certs import BundleMap, resolve_ca_path, load_cert_pool, load_ca_bundle
from .client_factory import (
    TransportSettings,
    RetryClientBuilderFn,
    build_retry_client,
    create_http_client
)
from .auth_keys import AuthKeyGetter, EnvironmentKeyGetter, load_service_auth_keys
from .fingerprint import ContentHash, get_content_hash, new_hash_code, hash_code
from .builder import (
    LoadState,
    ConfigBuilder,
    DefaultConfigBuilder,
    build_initial_config,
    new_config,
    load_config
)

__all__ = [
    "ConfigFlag",
    "LoggingConfig",
    "ServiceLoggingConfig",
    "ClientConfig",
    "ComponentConfigs",
    "AuthCredentials",
    "EndpointConfig",
    "ServiceConfig",
    "DatabaseConfig",
    "TRACE_LEVEL",
    "Config",
    "ConfigError",
    "FileOpenError",
    "DecodeError",
    "MergeError",
    "InvalidArgumentError",
    "CertFileUnreadableError",
    "CertParseError",
    "AuthKeyEmptyError",
    "AuthKeyRetrievalError",
    "NotFoundError",
    "ServiceNotFoundError",
    "DatabaseNotFoundError",
    "merge_component_configs",
    "merge_component_configs_for_all_services",
    "BundleMap",
    "resolve_ca_path",
    "load_cert_pool",
    "load_ca_bundle",
    "TransportSettings",
    "RetryClientBuilderFn",
    "build_retry_client",
    "create_http_client",
    "AuthKeyGetter",
    "EnvironmentKeyGetter",
    "load_service_auth_keys",
    "ContentHash",
    "get_content_hash",
    "new_hash_code",
    "hash_code",
    "LoadState",
    "ConfigBuilder",
    "DefaultConfigBuilder",
    "build_initial_config",
    "new_config",
    "load_config"
]
