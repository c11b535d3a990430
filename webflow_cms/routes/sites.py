"""Site routes: site details and publishing."""

from fastapi import APIRouter, Depends

from webflow_cms.dependencies import get_webflow_client
from webflow_cms.schemas.webflow import PublishRequest, PublishResponse
from webflow_cms.services import site_service
from webflow_cms.services.webflow_client import WebflowClient

router = APIRouter(prefix="/sites", tags=["Sites"])


@router.get("/{site_id}")
async def get_site(site_id: str, client: WebflowClient = Depends(get_webflow_client)):
    """Get site info."""
    return await site_service.get_site(client, site_id)


@router.post("/{site_id}/publish", response_model=PublishResponse)
async def publish_site(
    site_id: str,
    request: PublishRequest | None = None,
    client: WebflowClient = Depends(get_webflow_client),
):
    """Publish a site. Publishes to the webflow.io subdomain when no domains are given."""
    domains = request.domains if request else []
    return await site_service.publish_site(client, site_id, domains)
