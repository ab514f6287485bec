"""
Factory for HTTP clients built from merged client configs.
"""
import logging
import ssl
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Union

import httpx

from .certs import BundleMap
from .domain import ClientConfig
from .flags import ConfigFlag

logger = logging.getLogger(__name__)


@dataclass
class TransportSettings:
    """Base transport settings handed to the client builder.

    Durations are in seconds. Zero timeouts and limits mean "no limit".
    """
    timeout: float = 0.0
    idle_conn_timeout: float = 0.0
    max_idle_conns_per_host: int = 0
    max_conns_per_host: int = 0
    disable_compression: bool = False
    insecure_skip_verify: bool = False
    root_cas: Optional[ssl.SSLContext] = None


# (max_retries, transport settings) -> client
RetryClientBuilderFn = Callable[[int, TransportSettings], httpx.Client]


def _unlimited_if_zero(value: Union[int, float]) -> Optional[Union[int, float]]:
    return None if value == 0 else value


def build_retry_client(max_retries: int, settings: TransportSettings) -> httpx.Client:
    """Create an httpx.Client that retries failed connections ``max_retries`` times."""
    verify: Union[bool, ssl.SSLContext] = True
    if settings.insecure_skip_verify:
        verify = False
    elif settings.root_cas is not None:
        verify = settings.root_cas

    limits = httpx.Limits(
        max_connections=_unlimited_if_zero(settings.max_conns_per_host),
        max_keepalive_connections=_unlimited_if_zero(settings.max_idle_conns_per_host),
        keepalive_expiry=_unlimited_if_zero(settings.idle_conn_timeout),
    )
    transport = httpx.HTTPTransport(verify=verify, limits=limits, retries=max_retries)

    headers: Dict[str, str] = {}
    if settings.disable_compression:
        headers["Accept-Encoding"] = "identity"

    # Everything is configured explicitly, so environment proxies are ignored
    return httpx.Client(
        transport=transport,
        timeout=_unlimited_if_zero(settings.timeout),
        headers=headers,
        trust_env=False,
    )


def create_http_client(
    client_config: ClientConfig,
    cert_pools: BundleMap,
    retry_client_builder: RetryClientBuilderFn,
) -> httpx.Client:
    """Build a client for an already merged client config.

    The CA bundle is looked up by its unresolved path; a bundle missing from
    ``cert_pools`` falls back to the system trust store.
    """
    disable_compression = client_config.disable_compression == ConfigFlag.TRUE
    insecure_skip_verify = client_config.insecure_skip_verify == ConfigFlag.TRUE

    root_cas = None
    if not insecure_skip_verify:
        root_cas = cert_pools.get(client_config.ca_bundle_path)

    settings = TransportSettings(
        timeout=float(client_config.timeout),
        idle_conn_timeout=float(client_config.idle_conn_timeout),
        max_idle_conns_per_host=client_config.max_idle_conns_per_host,
        max_conns_per_host=client_config.max_conns_per_host,
        disable_compression=disable_compression,
        insecure_skip_verify=insecure_skip_verify,
        root_cas=root_cas,
    )
    logger.debug(
        f"Creating HTTP client: timeout={settings.timeout}s retries={client_config.max_retries} "
        f"skip_verify={insecure_skip_verify} custom_roots={root_cas is not None}"
    )
    return retry_client_builder(client_config.max_retries, settings)
