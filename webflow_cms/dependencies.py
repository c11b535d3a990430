from collections.abc import AsyncGenerator

from webflow_cms.config import settings
from webflow_cms.services.webflow_client import WebflowClient


async def get_webflow_client() -> AsyncGenerator[WebflowClient, None]:
    """Dependency that provides a Webflow client for one request."""
    async with WebflowClient.from_settings(settings) as client:
        yield client
