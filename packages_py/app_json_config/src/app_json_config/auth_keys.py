"""
Auth key retrieval for services that require authentication.
"""
import logging
import os
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

import httpx

from .domain import ServiceConfig
from .errors import AuthKeyEmptyError, AuthKeyRetrievalError, ConfigError

logger = logging.getLogger(__name__)


class AuthKeyGetter(ABC):
    """Retrieves the auth key of a service."""

    @abstractmethod
    def get_service_key(self, service: ServiceConfig, client: Optional[httpx.Client]) -> str:
        """Return the service's auth key, raising on failure."""
        pass


class EnvironmentKeyGetter(AuthKeyGetter):
    """Reads a service's auth key from the environment variable it names."""

    def get_service_key(self, service: ServiceConfig, client: Optional[httpx.Client]) -> str:
        if service.auth_environment_variable:
            return self.get_environment_key(service.auth_environment_variable)
        return ""

    @staticmethod
    def get_environment_key(environment_variable: str) -> str:
        auth_key = os.getenv(environment_variable, "")
        if not auth_key:
            raise AuthKeyEmptyError(f"Empty auth key for '{environment_variable}'")
        return auth_key


def load_service_auth_keys(
    services: Optional[Dict[str, ServiceConfig]],
    key_getter: AuthKeyGetter,
    client: Optional[httpx.Client],
) -> List[ConfigError]:
    """Fetch the auth key of every service that requires auth.

    Every service is attempted; the failures are returned rather than raised
    and the caller decides whether any of them is fatal.
    """
    logger.debug("Loading auth keys")
    errors: List[ConfigError] = []

    for name, service in (services or {}).items():
        if not service.auth_required:
            continue

        try:
            auth_key = key_getter.get_service_key(service, client)
        except Exception as e:
            logger.error(f"Error retrieving auth key for {name}: {e}")
            errors.append(AuthKeyRetrievalError(f"Error retrieving auth key for {name}:", e))
            continue

        if not auth_key:
            logger.error(f"Empty auth key for {name}")
            errors.append(AuthKeyEmptyError(f"Empty auth key for {name}"))
            continue

        service.auth_key = auth_key

    return errors
