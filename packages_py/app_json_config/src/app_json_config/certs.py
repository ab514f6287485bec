"""
CA bundle resolution and certificate pool cache.
"""
import logging
import os
import re
import ssl
from typing import Dict

from .errors import CertFileUnreadableError, CertParseError

logger = logging.getLogger(__name__)

PEM_CERT_MARKER = "-----BEGIN CERTIFICATE-----"
_PEM_CERT_BLOCK = re.compile(r"-----BEGIN CERTIFICATE-----.*?-----END CERTIFICATE-----", re.DOTALL)

# Keyed by the CA bundle path as written in the config, before resolution
BundleMap = Dict[str, ssl.SSLContext]


def resolve_ca_path(config_path: str, cert_path: str) -> str:
    """Resolve ``cert_path`` relative to the directory of ``config_path``.

    Returns "" (no CA bundle) when ``cert_path`` is empty or resolves to the
    current directory.
    """
    if not cert_path:
        return ""
    config_dir = os.path.dirname(config_path)
    resolved_path = os.path.normpath(os.path.join(config_dir, cert_path))
    if resolved_path == os.curdir:
        return ""
    return resolved_path


def load_cert_pool(ca_bundle_path: str) -> ssl.SSLContext:
    """Read the PEM certificates of a CA bundle into an SSL context trusting only them.

    Blocks that fail to parse are skipped. The bundle is rejected only when
    none of its certificates can be loaded.
    """
    try:
        with open(ca_bundle_path, "rb") as f:
            cert_data = f.read()
    except OSError as e:
        raise CertFileUnreadableError(f"Error reading cert file {ca_bundle_path}", e) from e

    pem_text = cert_data.decode("ascii", errors="ignore")
    if PEM_CERT_MARKER not in pem_text:
        raise CertParseError(f"error appending certs from cert file {ca_bundle_path}")

    # No system default roots: the pool trusts the bundle alone
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    loaded = 0
    last_error = None
    for block in _PEM_CERT_BLOCK.findall(pem_text):
        try:
            context.load_verify_locations(cadata=block)
        except (ssl.SSLError, ValueError) as e:
            logger.warning(f"Skipping unparseable certificate in {ca_bundle_path}: {e}")
            last_error = e
            continue
        loaded += 1

    if loaded == 0:
        raise CertParseError(f"error appending certs from cert file {ca_bundle_path}", last_error)

    logger.debug(f"Loaded {loaded} CA certificates from {ca_bundle_path}")
    return context


def load_ca_bundle(bundle_map: BundleMap, cleaned_ca_bundle_path: str, ca_bundle_path: str) -> None:
    """Load ``cleaned_ca_bundle_path`` into ``bundle_map`` under ``ca_bundle_path``.

    Nothing happens when ``ca_bundle_path`` is empty or already loaded.
    """
    if not ca_bundle_path:
        return
    if ca_bundle_path in bundle_map:
        return
    bundle_map[ca_bundle_path] = load_cert_pool(cleaned_ca_bundle_path)
