"""
Image hosting client.

The vision model only accepts images by URL, so every analysis first
publishes the photo to ImgBB with a short expiration.
"""

import base64
import logging
from abc import ABC, abstractmethod

import httpx

from nutriscan_api.core.exceptions import UploadError

logger = logging.getLogger(__name__)


class ImageHostService(ABC):
    """Abstract base class for services that turn image bytes into a public URL."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of this provider."""
        ...

    @abstractmethod
    async def upload(self, image_data: bytes, mime_type: str) -> str:
        """
        Upload an image and return its public URL.

        Raises:
            UploadError: If the host is unreachable or rejects the upload
        """
        ...

    async def close(self) -> None:
        """Release network resources."""


class ImgBBImageHost(ImageHostService):
    """Upload images to ImgBB (https://api.imgbb.com)."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.imgbb.com",
        expiration: int = 60,
        timeout: float = 30.0,
    ) -> None:
        """
        Initialize the ImgBB client.

        Args:
            api_key: ImgBB API key
            base_url: API base URL
            expiration: Seconds before ImgBB deletes the image
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.expiration = expiration
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def provider_name(self) -> str:
        return "imgbb"

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def upload(self, image_data: bytes, mime_type: str) -> str:
        client = await self._get_client()

        form = {
            "image": base64.b64encode(image_data).decode("utf-8"),
            "expiration": str(self.expiration),
        }

        logger.info(
            f"Uploading image to ImgBB ({len(image_data)} bytes, {mime_type})"
        )

        try:
            response = await client.post(
                "/1/upload",
                params={"key": self.api_key},
                data=form,
            )
        except httpx.TimeoutException as e:
            raise UploadError("Image upload timed out") from e
        except httpx.RequestError as e:
            raise UploadError(f"Failed to connect to image host: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise UploadError(
                "Failed to upload image: image host returned a non-JSON response",
                details={"status_code": response.status_code},
            ) from e

        if not isinstance(payload, dict) or payload.get("success") is not True:
            error = payload.get("error") if isinstance(payload, dict) else None
            message = "Unknown error"
            if isinstance(error, dict) and error.get("message"):
                message = error["message"]
            raise UploadError(
                f"Failed to upload image: {message}",
                details={"status_code": response.status_code},
            )

        data = payload.get("data")
        url = data.get("url") if isinstance(data, dict) else None
        if not isinstance(url, str) or not url:
            raise UploadError("Failed to upload image: no URL in response")

        logger.info("Image uploaded successfully")
        return url
