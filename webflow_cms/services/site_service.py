"""Site service: site details and publishing."""

import logging
from typing import Any

from webflow_cms.schemas.webflow import PublishResponse
from webflow_cms.services.webflow_client import WebflowClient

logger = logging.getLogger(__name__)


async def get_site(client: WebflowClient, site_id: str) -> Any:
    logger.info("Fetching site info for %s", site_id)
    return await client.get_site(site_id)


async def publish_site(client: WebflowClient, site_id: str, domains: list[str] | None = None) -> PublishResponse:
    """Publish a site to the given custom domains and its webflow.io subdomain."""
    logger.info("Publishing site %s", site_id, extra={"domains": domains or []})
    data = await client.publish_site(site_id, domains)
    return PublishResponse(success=True, message="Site published successfully", data=data)
