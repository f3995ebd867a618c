"""AWS client factory using boto3."""

from functools import wraps
from typing import Any

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from cwtail.config import AWSConfig
from cwtail.core.exceptions import BackendError, ConfigurationError
from cwtail.core.logging import get_logger

logger = get_logger(__name__)


class AWSClientFactory:
    """Factory for creating boto3 clients with consistent configuration."""

    def __init__(self, config: AWSConfig):
        self._config = config
        self._session: boto3.Session | None = None

    @property
    def session(self) -> boto3.Session:
        """Get or create boto3 session."""
        if self._session is None:
            profile = self._config.get_profile()
            region = self._config.get_region()

            session_kwargs: dict[str, Any] = {}
            if profile:
                session_kwargs["profile_name"] = profile
            if region:
                session_kwargs["region_name"] = region

            # Use explicit credentials if provided
            if self._config.access_key_id and self._config.secret_access_key:
                session_kwargs["aws_access_key_id"] = self._config.access_key_id
                session_kwargs["aws_secret_access_key"] = self._config.secret_access_key
                if self._config.session_token:
                    session_kwargs["aws_session_token"] = self._config.session_token

            try:
                self._session = boto3.Session(**session_kwargs)
                logger.debug("Created AWS session (profile=%s, region=%s)", profile, region)
            except BotoCoreError as e:
                raise ConfigurationError(f"Failed to create AWS session: {e}")

        return self._session

    @property
    def region(self) -> str:
        """Get the configured region."""
        return self.session.region_name or "us-east-1"

    def client(self, service_name: str, **kwargs: Any) -> Any:
        """Create a boto3 client for a service.

        Args:
            service_name: AWS service name (e.g., 'logs')
            **kwargs: Additional client configuration

        Returns:
            boto3 client instance
        """
        config = BotoConfig(
            retries={"max_attempts": 3, "mode": "adaptive"},
            connect_timeout=10,
            read_timeout=30,
        )

        client_kwargs: dict[str, Any] = {"config": config, **kwargs}

        if self._config.endpoint_url:
            client_kwargs["endpoint_url"] = self._config.endpoint_url

        try:
            return self.session.client(service_name, **client_kwargs)
        except BotoCoreError as e:
            raise BackendError(
                f"Failed to create {service_name} client: {e}",
                cause=e,
                service=service_name,
            )

    @property
    def logs(self) -> Any:
        """Get CloudWatch Logs client."""
        return self.client("logs")


def handle_aws_error(func: Any) -> Any:
    """Decorator translating botocore failures into BackendError."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            error_message = e.response.get("Error", {}).get("Message", str(e))
            raise BackendError(
                f"{error_code}: {error_message}",
                cause=e,
                service="logs",
                operation=getattr(e, "operation_name", None),
                details={"code": error_code},
            )
        except BotoCoreError as e:
            raise BackendError(str(e), cause=e, service="logs", operation=func.__name__)
        except KeyError as e:
            raise BackendError(
                f"Malformed response from {func.__name__}: missing {e}",
                cause=e,
                service="logs",
                operation=func.__name__,
            )

    return wrapper
