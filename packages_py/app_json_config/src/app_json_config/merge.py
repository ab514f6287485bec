"""
Merge per-service component config overrides with the defaults.

The override is copied first, then every field still at its zero value
(0, ConfigFlag.UNSET or "") is filled from the defaults. An override that is
explicitly zero is therefore indistinguishable from one that is not given:
a literal zero can only be forced at the default level.
"""
import logging
from typing import Optional

from .core import Config
from .domain import ClientConfig, ComponentConfigs, ServiceLoggingConfig
from .errors import ConfigError, InvalidArgumentError, MergeError
from .flags import ConfigFlag

logger = logging.getLogger(__name__)


def _copy_service_logging(target: ServiceLoggingConfig, source: ServiceLoggingConfig) -> None:
    target.log_call_duration = source.log_call_duration


def _copy_client(target: ClientConfig, source: ClientConfig) -> None:
    target.timeout = source.timeout
    target.idle_conn_timeout = source.idle_conn_timeout
    target.max_idle_conns_per_host = source.max_idle_conns_per_host
    target.max_conns_per_host = source.max_conns_per_host
    target.max_retries = source.max_retries
    target.disable_compression = source.disable_compression
    target.insecure_skip_verify = source.insecure_skip_verify
    target.ca_bundle_path = source.ca_bundle_path


def _fill_service_logging(target: ServiceLoggingConfig, defaults: ServiceLoggingConfig) -> None:
    if target.log_call_duration == ConfigFlag.UNSET:
        target.log_call_duration = defaults.log_call_duration


def _fill_client(target: ClientConfig, defaults: ClientConfig) -> None:
    if target.timeout == 0:
        target.timeout = defaults.timeout
    if target.idle_conn_timeout == 0:
        target.idle_conn_timeout = defaults.idle_conn_timeout
    if target.max_idle_conns_per_host == 0:
        target.max_idle_conns_per_host = defaults.max_idle_conns_per_host
    if target.max_conns_per_host == 0:
        target.max_conns_per_host = defaults.max_conns_per_host
    if target.max_retries == 0:
        target.max_retries = defaults.max_retries
    if target.disable_compression == ConfigFlag.UNSET:
        target.disable_compression = defaults.disable_compression
    if target.insecure_skip_verify == ConfigFlag.UNSET:
        target.insecure_skip_verify = defaults.insecure_skip_verify
    if target.ca_bundle_path == "":
        target.ca_bundle_path = defaults.ca_bundle_path


def merge_component_configs(
    service_overrides: Optional[ComponentConfigs],
    defaults: Optional[ComponentConfigs],
    merged: Optional[ComponentConfigs],
) -> None:
    """Merge ``service_overrides`` and ``defaults`` into ``merged`` in place.

    Either source may be None and is then skipped. A None target raises
    InvalidArgumentError before anything is touched.
    """
    if merged is None:
        raise InvalidArgumentError("merge target must not be None")

    if service_overrides is not None:
        _copy_service_logging(merged.service_logging, service_overrides.service_logging)
        _copy_client(merged.client, service_overrides.client)

    if defaults is not None:
        _fill_service_logging(merged.service_logging, defaults.service_logging)
        _fill_client(merged.client, defaults.client)


def merge_component_configs_for_all_services(config: Config) -> None:
    """Populate every service's merged component configs from its overrides and the defaults."""
    defaults = config.default_component_configs
    for name, service in config.service_configs.items():
        merged = ComponentConfigs()
        try:
            merge_component_configs(service.component_config_overrides, defaults, merged)
        except ConfigError as e:
            raise MergeError(f"Error merging component config: {name}", e) from e
        service._merged_component_configs = merged
        logger.debug(f"Merged component configs for service '{name}'")
