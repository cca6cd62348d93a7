"""
Plant API — Cloudinary Media Host
==================================

What:  Uploads plant photos to Cloudinary and asks for an optimised rendition.
How:   The Cloudinary SDK upload call is blocking, so it runs in a worker
       thread; the await is bounded by `asyncio.wait_for` with the configured
       timeout. Credentials are passed per call instead of through the SDK's
       global `cloudinary.config()`.
Who:   UploadService, via the MediaHost interface.

Requested rendition:
    1. Fit inside 800x800, never upscaled   {width, height, crop: "limit"}
    2. Automatic quality                    {quality: "auto"}
    3. Automatic format (webp/avif/...)     {fetch_format: "auto"}

Timeout semantics:
    When the timeout fires the request fails with MediaHostError; the SDK's
    own socket timeout (same value) ends the worker thread's HTTP call.
"""

import asyncio
import io
import logging
import time
from typing import Any, Dict, List

import cloudinary.uploader

from plant_api.exceptions import MediaHostError
from plant_api.services.media_base import MediaHost, UploadResult

logger = logging.getLogger(__name__)


class CloudinaryMediaHost(MediaHost):

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        timeout: float = 30.0,
        max_dimension: int = 800,
    ):
        self.cloud_name = cloud_name
        self._api_key = api_key
        self._api_secret = api_secret
        self.timeout = timeout
        self.max_dimension = max_dimension

    @property
    def transformation(self) -> List[Dict[str, Any]]:
        return [
            {"width": self.max_dimension, "height": self.max_dimension, "crop": "limit"},
            {"quality": "auto"},
            {"fetch_format": "auto"},
        ]

    def _upload_options(self, folder: str, public_id: str) -> Dict[str, Any]:
        return {
            "resource_type": "image",
            "folder": folder,
            "public_id": public_id,
            "transformation": self.transformation,
            "cloud_name": self.cloud_name,
            "api_key": self._api_key,
            "api_secret": self._api_secret,
            "secure": True,
            "timeout": self.timeout,
        }

    async def upload_image(self, content: bytes, folder: str, public_id: str) -> UploadResult:
        if not (self.cloud_name and self._api_key and self._api_secret):
            raise MediaHostError(
                message="Image hosting is not configured.",
                context={"missing": "cloudinary credentials"},
            )

        options = self._upload_options(folder, public_id)
        start_time = time.perf_counter()

        try:
            result = await asyncio.wait_for(
                asyncio.to_thread(cloudinary.uploader.upload, io.BytesIO(content), **options),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(
                "Cloudinary upload timed out after %.1fs (folder=%s, public_id=%s)",
                self.timeout,
                folder,
                public_id,
            )
            raise MediaHostError(
                message="Image upload timed out. Please try again.",
                context={"folder": folder, "public_id": public_id, "timeout": self.timeout},
            ) from e
        except Exception as e:
            logger.error("Cloudinary upload error: %s", str(e))
            raise MediaHostError(
                context={"folder": folder, "public_id": public_id, "error_type": type(e).__name__},
            ) from e

        duration_ms = (time.perf_counter() - start_time) * 1000

        secure_url = result.get("secure_url")
        returned_id = result.get("public_id")
        if not secure_url or not returned_id:
            logger.error("Cloudinary response missing secure_url/public_id: keys=%s", sorted(result))
            raise MediaHostError(context={"folder": folder, "public_id": public_id})

        logger.info(
            "Image uploaded to Cloudinary in %.0fms: %s (%d bytes)",
            duration_ms,
            returned_id,
            len(content),
        )
        return UploadResult(url=secure_url, public_id=returned_id)
