"""
Client for the external image host.

The host lives outside the API base URL and answers ``{"url": ...}``.
"""
import logging
from pathlib import Path
from typing import Optional

import httpx

from ekraf_admin import config
from ekraf_admin.common.errors import ApiError, ServerError, MalformedResponseError, normalize_error
from ekraf_admin.common.scope import RequestScope
from ekraf_admin.uploader.schemas import ImageAsset, UploaderResponse

logger = logging.getLogger(__name__)

CONTEXT = "uploading image"


class UploaderService:
    def __init__(self, http: Optional[httpx.AsyncClient] = None, url: str = config.UPLOADER_URL):
        self.http = http or httpx.AsyncClient()
        self.url = url

    async def upload_image(self, asset: ImageAsset, scope: Optional[RequestScope] = None) -> str:
        """
        Upload a local image and return its hosted URL.

        Args:
            asset: Image with local path, file name and MIME type
            scope: Cancellation scope owning the request

        Returns:
            The URL of the hosted image

        Raises:
            ApiError: If the asset is incomplete, the upload is rejected or the
                response carries no URL
        """
        if not asset.is_complete:
            raise ApiError("Incomplete image data for upload.", context=CONTEXT)

        content = asset.content
        if content is None:
            try:
                content = Path(asset.uri).read_bytes()
            except OSError as exc:
                raise ApiError(f"Cannot read image {asset.file_name}.", context=CONTEXT) from exc

        call = self._post(asset, content)
        try:
            if scope is not None:
                return await scope.run(call, CONTEXT)
            return await call
        except (httpx.HTTPError, ValueError) as exc:
            raise normalize_error(exc, CONTEXT) from exc

    async def _post(self, asset: ImageAsset, content: bytes) -> str:
        response = await self.http.post(
            self.url,
            headers={"Accept": "application/json"},
            files={"file": (asset.file_name, content, asset.mime_type)},
        )
        if not response.is_success:
            raise ServerError(
                "Failed to upload the image to the server.",
                context=CONTEXT,
                status_code=response.status_code,
            )

        result = UploaderResponse.model_validate(response.json())
        if not result.url:
            raise MalformedResponseError("Invalid server response after upload.", context=CONTEXT)
        logger.info("Uploaded %s to %s", asset.file_name, result.url)
        return result.url

    async def aclose(self) -> None:
        await self.http.aclose()
