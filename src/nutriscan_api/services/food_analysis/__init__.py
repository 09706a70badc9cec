"""
Food Analysis Service - meal photo to nutrition facts.

Image host upload, vision model call, JSON extraction, normalization and
nutrient aggregation.
"""

from .aggregator import aggregate, parse_nutrient
from .extractor import extract_json
from .factory import clear_pipeline_cache, get_food_analysis_pipeline
from .image_host import ImageHostService, ImgBBImageHost
from .normalizer import normalize
from .pipeline import FoodAnalysisPipeline, parse_model_reply
from .vision_model import MistralVisionModel, VisionModelService

__all__ = [
    "aggregate",
    "parse_nutrient",
    "extract_json",
    "normalize",
    "parse_model_reply",
    "FoodAnalysisPipeline",
    "ImageHostService",
    "ImgBBImageHost",
    "VisionModelService",
    "MistralVisionModel",
    "get_food_analysis_pipeline",
    "clear_pipeline_cache",
]
