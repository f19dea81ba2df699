"""Profile image storage on local disk."""

import logging
import os
import uuid
from pathlib import Path

from app.config import get_settings
from app.validation import decode_image

logger = logging.getLogger("hoaxify")


class FileStorageService:
    """Stores decoded profile images under UPLOAD_DIR/PROFILE_DIR with random names."""

    def ensure_directories(self) -> Path:
        profile_dir = get_settings().profile_image_dir
        profile_dir.mkdir(parents=True, exist_ok=True)
        return profile_dir

    def save_profile_image(self, image: str) -> str:
        """Decode a base64 image and write it to disk. Returns the stored filename."""
        content = decode_image(image)
        profile_dir = self.ensure_directories()
        stored_filename = uuid.uuid4().hex
        with open(profile_dir / stored_filename, "wb") as f:
            f.write(content)
        return stored_filename

    def delete_profile_image(self, filename: str | None) -> None:
        """Remove a previously stored image. Missing files are ignored."""
        if not filename:
            return
        file_path = get_settings().profile_image_dir / Path(filename).name
        if file_path.exists():
            os.remove(file_path)
            logger.debug("Removed profile image %s", file_path)


_file_storage_service: FileStorageService | None = None


def get_file_storage_service() -> FileStorageService:
    """Get singleton file storage service instance."""
    global _file_storage_service
    if _file_storage_service is None:
        _file_storage_service = FileStorageService()
    return _file_storage_service
