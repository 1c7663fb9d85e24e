"""DynamoDB client construction.

Region and profile are passed straight to `boto3.Session`; nothing here
touches `os.environ`, so building two clients for two profiles in one
process is safe.
"""

from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError

from .exceptions import ConfigurationError, MissingConfigError
from .logger import Logger
from .settings import HephaestusSettings

logger = Logger(__name__)


def new_client(
    region: Optional[str],
    profile: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    config: Optional[Config] = None,
) -> Any:
    """Return a low-level boto3 DynamoDB client.

    Args:
        region: AWS region, e.g. "ap-southeast-1"
        profile: Named profile from the shared credentials/config files
        endpoint_url: Alternate endpoint such as DynamoDB Local
        config: botocore client config (retries, timeouts)

    Raises:
        MissingConfigError: region is empty
        ConfigurationError: the profile cannot be loaded
    """
    if not region:
        raise MissingConfigError("Configuration not set", config_key="AWS_REGION")
    try:
        session = boto3.Session(profile_name=profile or None, region_name=region)
        client = session.client("dynamodb", endpoint_url=endpoint_url or None, config=config)
    except BotoCoreError as e:
        raise ConfigurationError(f"Failed to create DynamoDB client: {e}", profile=profile, region=region) from e
    logger.message("DynamoDB client created: region=%s profile=%s", region, profile or "<default>")
    return client


def client_from_settings(settings: HephaestusSettings) -> Any:
    return new_client(
        region=settings.AWS_REGION,
        profile=settings.AWS_PROFILE,
        endpoint_url=settings.AWS_ENDPOINT_URL,
    )
