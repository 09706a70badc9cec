"""
Factory for the food analysis pipeline.

Builds the image host and vision model clients from application settings.
"""

import logging
from functools import lru_cache

from nutriscan_api.core.config import get_settings

from .image_host import ImgBBImageHost
from .pipeline import FoodAnalysisPipeline
from .vision_model import MistralVisionModel

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_food_analysis_pipeline() -> FoodAnalysisPipeline:
    """
    Get the configured food analysis pipeline.

    Configuration is read from Settings:
    - IMGBB_API_KEY / IMGBB_BASE_URL / IMAGE_EXPIRATION_SECONDS
    - MISTRAL_API_KEY / MISTRAL_BASE_URL / MISTRAL_MODEL
    """
    settings = get_settings()

    if not settings.is_analysis_configured:
        logger.warning(
            "Food analysis API keys not configured "
            f"(mistral={bool(settings.mistral_api_key)}, "
            f"imgbb={bool(settings.imgbb_api_key)})"
        )

    logger.info(
        f"Configuring food analysis: imgbb -> mistral/{settings.mistral_model}"
    )

    return FoodAnalysisPipeline(
        image_host=ImgBBImageHost(
            api_key=settings.imgbb_api_key,
            base_url=settings.imgbb_base_url,
            expiration=settings.image_expiration_seconds,
            timeout=settings.image_host_timeout,
        ),
        vision_model=MistralVisionModel(
            api_key=settings.mistral_api_key,
            base_url=settings.mistral_base_url,
            model=settings.mistral_model,
            timeout=settings.vision_timeout,
        ),
    )


def clear_pipeline_cache() -> None:
    """Clear the cached pipeline instance (useful for testing)."""
    get_food_analysis_pipeline.cache_clear()
