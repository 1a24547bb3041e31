from __future__ import annotations

import base64
import logging
from typing import Optional, Tuple

import cloudinary.uploader
import requests

from config import Settings
from filters import is_absolute_url
from logs import log_event

logger = logging.getLogger(__name__)

# Fit inside 1200x630, automatic quality, automatic format.
TRANSFORMATION = [
    {"width": 1200, "height": 630, "crop": "limit"},
    {"quality": "auto"},
    {"fetch_format": "auto"},
]
MAX_IMAGE_BYTES = 10_000_000
CHUNK_SIZE = 64 * 1024


def download_image(session: requests.Session, image_url: str, timeout: int) -> Optional[Tuple[bytes, str]]:
    try:
        with session.get(image_url, timeout=timeout, stream=True) as r:
            if r.status_code >= 400:
                return None
            content_type = r.headers.get("Content-Type", "")
            if not content_type.startswith("image/"):
                return None
            blob = bytearray()
            for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
                blob.extend(chunk)
                if len(blob) > MAX_IMAGE_BYTES:
                    log_event(logger, logging.WARNING, "image_too_large", url=image_url, limit=MAX_IMAGE_BYTES)
                    return None
    except Exception as exc:  # noqa: BLE001
        log_event(logger, logging.WARNING, "image_download_failed", url=image_url, error=repr(exc))
        return None
    if not blob:
        return None
    return bytes(blob), content_type


def to_data_uri(blob: bytes, content_type: str) -> str:
    return f"data:{content_type};base64,{base64.b64encode(blob).decode('ascii')}"


class ImageHost:
    """Re-hosts lead images on Cloudinary; passes URLs through when unconfigured."""

    def __init__(self, settings: Settings, session: requests.Session):
        self.settings = settings
        self.session = session

    def is_configured(self) -> bool:
        s = self.settings
        return bool(s.cloudinary_cloud_name and s.cloudinary_api_key and s.cloudinary_api_secret)

    def rehost(self, image_url: str) -> str:
        if not image_url:
            return ""
        if not self.is_configured():
            log_event(logger, logging.INFO, "image_host_unconfigured", url=image_url)
            return image_url
        if not is_absolute_url(image_url):
            log_event(logger, logging.WARNING, "image_url_invalid", url=image_url)
            return ""
        return self.upload(image_url)

    def upload(self, image_url: str) -> str:
        downloaded = download_image(self.session, image_url, self.settings.request_timeout)
        if downloaded is None:
            log_event(logger, logging.WARNING, "image_upload_skipped", url=image_url, reason="download_failed")
            return ""
        blob, content_type = downloaded

        s = self.settings
        try:
            result = cloudinary.uploader.upload(
                to_data_uri(blob, content_type),
                folder=s.cloudinary_folder,
                resource_type="image",
                transformation=TRANSFORMATION,
                cloud_name=s.cloudinary_cloud_name,
                api_key=s.cloudinary_api_key,
                api_secret=s.cloudinary_api_secret,
                timeout=s.request_timeout,
            )
            hosted = result.get("secure_url") or ""
        except Exception as exc:  # noqa: BLE001
            log_event(logger, logging.ERROR, "image_upload_failed", url=image_url, error=repr(exc))
            return ""
        log_event(logger, logging.INFO, "image_uploaded", url=hosted)
        return hosted
