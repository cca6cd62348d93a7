"""
Plant API — Abstract Media Host Interface
==========================================

What:  Contract for the remote service that stores and transforms images.
How:   Concrete hosts implement `upload_image()`; callers only see
       `UploadResult` on success and `MediaHostError` on failure.
Who:   UploadService forwards validated image bytes through this interface.

Implementations:
    - CloudinaryMediaHost: Cloudinary upload API (default)
    - Test doubles: any object with an async `upload_image` of this shape
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class UploadResult:
    """Outcome of a successful upload."""

    url: str
    public_id: str


class MediaHost(ABC):

    @abstractmethod
    async def upload_image(self, content: bytes, folder: str, public_id: str) -> UploadResult:
        """
        Send raw image bytes to the host and return the public rendition.

        Args:
            content: Raw image bytes, already size- and type-checked.
            folder: Destination folder on the host (slash-separated).
            public_id: File name inside `folder`, without extension.

        Returns:
            UploadResult with the HTTPS URL and the host's full public id.

        Raises:
            MediaHostError: Host rejected the upload, failed, or timed out.
        """
        ...
