"""
This module defines the models used by the image uploader.
"""

from typing import Optional

from pydantic import BaseModel


class ImageAsset(BaseModel):
    """
    A local image picked for upload.

    ``uri`` is a local path; ``content`` may carry the bytes directly, in which
    case the path is not read.
    """
    uri: Optional[str] = None
    file_name: Optional[str] = None
    mime_type: Optional[str] = None
    content: Optional[bytes] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.uri and self.file_name and self.mime_type)


class UploaderResponse(BaseModel):
    url: Optional[str] = None
