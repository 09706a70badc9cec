"""
Food image analysis pipeline.

Upload -> vision model -> JSON extraction -> normalization. Stages run
strictly in order and the first failure is raised to the caller; nothing is
retried or cached.
"""

import logging
import time

from nutriscan_api.core.exceptions import ValidationError
from nutriscan_api.models.nutrition import AnalysisResult, NutritionTotals

from .aggregator import aggregate
from .extractor import extract_json
from .image_host import ImageHostService
from .normalizer import normalize
from .vision_model import VisionModelService

logger = logging.getLogger(__name__)


def parse_model_reply(raw_text: str) -> AnalysisResult:
    """Extract and normalize the food items from a model reply."""
    return normalize(extract_json(raw_text))


class FoodAnalysisPipeline:
    """
    Coordinates the image host, the vision model and the parsing steps.

    Usage:
        pipeline = FoodAnalysisPipeline(image_host, vision_model)
        result = await pipeline.analyze(image_bytes, "image/jpeg")
    """

    def __init__(
        self,
        image_host: ImageHostService,
        vision_model: VisionModelService,
    ) -> None:
        self.image_host = image_host
        self.vision_model = vision_model

    async def analyze(self, image_data: bytes, mime_type: str) -> AnalysisResult:
        """
        Analyze a meal photo.

        Args:
            image_data: Raw image bytes
            mime_type: MIME type of the image (must be image/*)

        Returns:
            AnalysisResult with the food items the model reported

        Raises:
            ValidationError: If the input is not a non-empty image
            UploadError: If the image host fails
            ModelError: If the vision model fails
            ExtractionError: If the reply contains no parseable JSON
            SchemaError: If the JSON lacks a food_items array
        """
        if not image_data:
            raise ValidationError("No image file provided")
        if not mime_type or not mime_type.lower().startswith("image/"):
            raise ValidationError(
                "Only image files are supported",
                details={"mime_type": mime_type},
            )

        start_time = time.time()
        logger.info("Starting food analysis...")

        image_url = await self.image_host.upload(image_data, mime_type)

        logger.info(f"Analyzing image with {self.vision_model.provider_name}")
        raw_reply = await self.vision_model.complete(image_url)

        result = parse_model_reply(raw_reply)

        processing_time = int((time.time() - start_time) * 1000)
        logger.info(
            f"Analysis complete: {len(result.items)} items in {processing_time} ms"
        )
        return result

    async def analyze_and_total(
        self, image_data: bytes, mime_type: str
    ) -> tuple[AnalysisResult, NutritionTotals]:
        """Analyze a meal photo and compute its nutrient totals."""
        result = await self.analyze(image_data, mime_type)
        return result, aggregate(result.items)

    async def close(self) -> None:
        """Close both external clients."""
        await self.image_host.close()
        await self.vision_model.close()
