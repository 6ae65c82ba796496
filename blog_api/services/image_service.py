"""
Сервис для работы с изображениями постов.

Обеспечивает валидацию загружаемых файлов, генерацию имен
и сохранение в хранилище.
"""

import logging
import mimetypes
import uuid
from io import BytesIO
from pathlib import Path
from typing import Optional

from PIL import Image

from blog_api.core.config import settings
from blog_api.core.exceptions import BlogError, ValidationError
from blog_api.services.storage_service import StorageProvider

logger = logging.getLogger(__name__)


class ImageService:
    """
    Сервис для работы с изображениями постов.

    Обеспечивает:
    - Валидацию расширения, размера и содержимого файла
    - Генерацию уникального имени
    - Сохранение в хранилище
    """

    def __init__(self, storage: StorageProvider):
        self.storage = storage

    def validate_upload(self, filename: str, data: bytes) -> str:
        """
        Валидация загруженного файла.

        Args:
            filename: Оригинальное имя файла
            data: Содержимое файла

        Returns:
            str: Расширение файла в нижнем регистре

        Raises:
            ValidationError: Если файл не подходит
        """
        file_ext = Path(filename or "").suffix.lower()
        allowed = settings.allowed_image_extensions
        if file_ext not in allowed:
            raise ValidationError(
                f"Unsupported file format: {file_ext or 'none'}. Supported: {', '.join(allowed)}"
            )

        if len(data) > settings.MAX_IMAGE_SIZE:
            raise ValidationError(
                f"File size exceeds maximum allowed size of {settings.MAX_IMAGE_SIZE} bytes"
            )

        try:
            with Image.open(BytesIO(data)) as img:
                img.verify()
        except Exception as e:
            raise ValidationError("Uploaded file is not a valid image") from e

        return file_ext

    @staticmethod
    def generate_filename(file_ext: str) -> str:
        return f"featured-{uuid.uuid4().hex}{file_ext}"

    def store_featured_image(self, filename: str, data: bytes) -> str:
        """
        Проверить и сохранить изображение поста.

        Returns:
            str: Имя сохраненного файла для поля featuredImage
        """
        file_ext = self.validate_upload(filename, data)
        stored_name = self.generate_filename(file_ext)
        content_type, _ = mimetypes.guess_type(stored_name)

        if not self.storage.save_file(stored_name, BytesIO(data), content_type):
            raise BlogError("Failed to store uploaded image")

        logger.info(f"Featured image stored: {filename} -> {stored_name}")
        return stored_name

    def discard(self, stored_name: Optional[str]) -> None:
        """Удалить файл, сохраненный для операции, которая не удалась."""
        if stored_name:
            self.storage.delete_file(stored_name)
