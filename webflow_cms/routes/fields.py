"""Field type routes: registry introspection and video previews."""

from typing import Any

from fastapi import APIRouter

from webflow_cms.fields import video
from webflow_cms.fields.registry import describe_field_types
from webflow_cms.schemas.webflow import VideoClassifyRequest

router = APIRouter(tags=["Fields"])


@router.get("/field-types")
async def list_field_types() -> list[dict[str, Any]]:
    """Supported field types with their aliases, input types and defaults."""
    return describe_field_types()


@router.post("/video/classify", response_model=video.VideoClassification)
async def classify_video(request: VideoClassifyRequest):
    """Classify a video URL for inline preview."""
    return video.classify(request.url)
