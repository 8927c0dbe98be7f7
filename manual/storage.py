"""
Media uploads.

Thin adapter over a Django storage backend: files land under
MANUAL_UPLOAD_DIR with a random name and the public URL is returned.
"""
import logging
import os
import uuid

from django.conf import settings
from django.core.files.storage import default_storage
from django.utils import timezone
from django.utils.text import get_valid_filename

from .exceptions import UploadFailed, UploadRejected

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {
    'png', 'jpg', 'jpeg', 'gif', 'webp', 'svg',
    'mp4', 'mov', 'webm',
}


def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


class MediaStorage:
    """Stores uploaded files and hands back their public URL."""

    def __init__(self, storage=None, upload_dir=None):
        self.storage = storage or default_storage
        self.upload_dir = upload_dir or getattr(settings, 'MANUAL_UPLOAD_DIR', 'uploads')

    def upload(self, file) -> str:
        """
        Save ``file`` and return its public URL.

        Raises UploadRejected for disallowed file types and UploadFailed for
        storage errors.
        Nothing is retried.
        """
        filename = get_valid_filename(os.path.basename(getattr(file, 'name', '') or 'upload'))
        if not allowed_file(filename):
            raise UploadRejected(f"File type not allowed: {filename}")

        ext = filename.rsplit('.', 1)[1].lower()
        name = f"{int(timezone.now().timestamp())}_{uuid.uuid4().hex}.{ext}"

        try:
            stored = self.storage.save(f"{self.upload_dir}/{name}", file)
            url = self.storage.url(stored)
        except Exception as e:
            logger.exception("Failed to upload %s: %s", filename, e)
            raise UploadFailed() from e

        logger.info("Uploaded %s as %s", filename, stored)
        return url
