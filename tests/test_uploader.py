"""
Tests for the image uploader client.
"""
import httpx
import pytest

from ekraf_admin.common.errors import ApiError, ConnectivityError, MalformedResponseError, ServerError
from ekraf_admin.uploader.schemas import ImageAsset
from ekraf_admin.uploader.services import UploaderService

UPLOAD_URL = "https://uploader.test/upload"


def _service(handler):
    return UploaderService(httpx.AsyncClient(transport=httpx.MockTransport(handler)), url=UPLOAD_URL)


@pytest.fixture
def asset():
    return ImageAsset(uri="/tmp/logo.png", file_name="logo.png", mime_type="image/png", content=b"\x89PNG")


class TestUploadImage:
    @pytest.mark.asyncio
    async def test_returns_hosted_url(self, asset):
        received = []

        def handler(request):
            received.append(request)
            return httpx.Response(200, json={"url": "https://cdn.test/logo.png"})

        service = _service(handler)
        url = await service.upload_image(asset)
        await service.aclose()

        assert url == "https://cdn.test/logo.png"
        request = received[0]
        assert str(request.url) == UPLOAD_URL
        assert request.headers["Accept"] == "application/json"
        body = request.read()
        assert b'name="file"' in body
        assert b'filename="logo.png"' in body
        assert b"image/png" in body

    @pytest.mark.asyncio
    async def test_reads_the_local_file(self, tmp_path):
        image = tmp_path / "banner.jpg"
        image.write_bytes(b"jpeg-bytes")
        bodies = []

        def handler(request):
            bodies.append(request.read())
            return httpx.Response(200, json={"url": "https://cdn.test/banner.jpg"})

        service = _service(handler)
        await service.upload_image(ImageAsset(uri=str(image), file_name="banner.jpg", mime_type="image/jpeg"))
        await service.aclose()

        assert b"jpeg-bytes" in bodies[0]

    @pytest.mark.asyncio
    async def test_incomplete_asset(self):
        def handler(request):
            raise AssertionError("nothing should be sent")

        service = _service(handler)
        with pytest.raises(ApiError) as exc_info:
            await service.upload_image(ImageAsset(uri="/tmp/logo.png", file_name="logo.png"))
        await service.aclose()

        assert exc_info.value.message == "Incomplete image data for upload."

    @pytest.mark.asyncio
    async def test_rejected_upload(self, asset):
        service = _service(lambda request: httpx.Response(413, json={"message": "Too large"}))

        with pytest.raises(ServerError) as exc_info:
            await service.upload_image(asset)
        await service.aclose()

        assert exc_info.value.message == "Failed to upload the image to the server."
        assert exc_info.value.status_code == 413

    @pytest.mark.asyncio
    async def test_response_without_url(self, asset):
        service = _service(lambda request: httpx.Response(200, json={"status": "ok"}))

        with pytest.raises(MalformedResponseError) as exc_info:
            await service.upload_image(asset)
        await service.aclose()

        assert exc_info.value.message == "Invalid server response after upload."

    @pytest.mark.asyncio
    async def test_host_unreachable(self, asset):
        def handler(request):
            raise httpx.ConnectError("dns failure", request=request)

        service = _service(handler)
        with pytest.raises(ConnectivityError):
            await service.upload_image(asset)
        await service.aclose()

    @pytest.mark.asyncio
    async def test_available_on_the_facade(self, api, asset):
        """Test the facade's uploader is wired to its own host, not the API base URL."""
        with pytest.raises(ServerError):
            await api.uploader.upload_image(asset)
        assert api.uploader.url == "https://uploader.test/upload"
