"""
Vision-language model client.

Sends the hosted image URL together with a fixed instruction prompt to a
Mistral chat completions endpoint and returns the reply text untouched.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from nutriscan_api.core.exceptions import ModelError

logger = logging.getLogger(__name__)


# Prompt for nutrition analysis
NUTRITION_ANALYSIS_PROMPT = """Identify the food items in the image and return only a structured JSON response in the following format:
{
  "food_items": [
    {
      "item": "",
      "calories": "",
      "protein": "",
      "fat": "",
      "vitamin_e": "",
      "carbohydrates": "",
      "fiber": "",
      "iron": ""
    }
  ]
}
Ensure the response is for the entire plate, summing up all the individual pieces. Ensure the response is valid JSON without any additional text, explanations, or formatting outside the JSON structure."""


class VisionModelService(ABC):
    """Abstract base class for multimodal models that describe a hosted image."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of this provider."""
        ...

    @abstractmethod
    async def complete(self, image_url: str) -> str:
        """
        Ask the model for the nutrition JSON of the image at image_url.

        Returns:
            The model's free-text reply

        Raises:
            ModelError: If the endpoint fails or returns no text
        """
        ...

    async def close(self) -> None:
        """Release network resources."""


class MistralVisionModel(VisionModelService):
    """Nutrition analysis with Mistral's Pixtral models."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.mistral.ai",
        model: str = "pixtral-12b-2409",
        timeout: float = 60.0,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def provider_name(self) -> str:
        return f"mistral/{self.model}"

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def build_request(self, image_url: str) -> dict[str, Any]:
        """Build the chat completion request body."""
        return {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": NUTRITION_ANALYSIS_PROMPT},
                        {"type": "image_url", "image_url": image_url},
                    ],
                }
            ],
        }

    async def complete(self, image_url: str) -> str:
        client = await self._get_client()

        logger.info(f"Sending nutrition analysis request to Mistral ({self.model})")

        try:
            response = await client.post(
                "/v1/chat/completions",
                json=self.build_request(image_url),
            )
        except httpx.TimeoutException as e:
            raise ModelError(f"Vision model request timed out ({self.model})") from e
        except httpx.RequestError as e:
            raise ModelError(f"Failed to connect to vision model: {e}") from e

        if not response.is_success:
            logger.error(
                f"Mistral API error: {response.status_code} {response.text[:500]}"
            )
            raise ModelError(
                f"Vision model API error: {response.status_code}",
                details={"status_code": response.status_code},
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ModelError("Vision model returned a non-JSON response") from e

        content = self._first_choice_content(payload)
        if not isinstance(content, str) or not content.strip():
            raise ModelError("No valid response content from AI analysis")

        logger.debug(f"Raw model response: {content[:500]}...")
        return content

    @staticmethod
    def _first_choice_content(payload: Any) -> Any:
        if not isinstance(payload, dict):
            return None
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            return None
        first = choices[0]
        if not isinstance(first, dict):
            return None
        message = first.get("message")
        if not isinstance(message, dict):
            return None
        return message.get("content")
