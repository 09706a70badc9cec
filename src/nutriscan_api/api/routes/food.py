"""Food image analysis API routes."""

import logging

from fastapi import APIRouter, File, UploadFile

from nutriscan_api.api.dependencies import CurrentUserDep, PipelineDep, SettingsDep
from nutriscan_api.core.exceptions import ValidationError
from nutriscan_api.models.nutrition import AnalyzeResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_food(
    user: CurrentUserDep,
    pipeline: PipelineDep,
    settings: SettingsDep,
    image: UploadFile | None = File(None, description="Photo of the meal"),
):
    """
    Analyze a meal photo.

    Requires a bearer token.

    The image is uploaded to the image host, described by the vision model,
    and the reply is parsed into food items. Totals are summed across items.

    Failures carry a `kind` of upload, model, extraction or schema; the
    client may simply retry the whole request.
    """
    if image is None:
        raise ValidationError("No image file provided")

    content = await image.read()
    if len(content) > settings.max_image_bytes:
        raise ValidationError(
            f"Image exceeds maximum size of {settings.max_image_bytes // (1024 * 1024)} MB",
            details={"size": len(content), "max_size": settings.max_image_bytes},
        )

    logger.info(f"Image received from {user.id}: {image.filename} {len(content)} bytes")

    result, totals = await pipeline.analyze_and_total(
        content, image.content_type or ""
    )
    return AnalyzeResponse.from_result(result, totals)
