"""
Сервис для работы с хранилищами загружаемых файлов.

Поддерживает локальное хранилище и Amazon S3 (или совместимое, например MinIO).
Обеспечивает единый интерфейс для работы с файлами
независимо от типа хранилища.
"""

import logging
import shutil
from abc import ABC, abstractmethod
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from blog_api.core.config import settings

logger = logging.getLogger(__name__)


class StorageProvider(ABC):
    """
    Абстрактный базовый класс для провайдеров хранилища.
    """

    @abstractmethod
    def save_file(
        self, file_path: str, file_data: BinaryIO, content_type: Optional[str] = None
    ) -> bool:
        pass

    @abstractmethod
    def delete_file(self, file_path: str) -> bool:
        pass

    @abstractmethod
    def file_exists(self, file_path: str) -> bool:
        pass


class LocalStorageProvider(StorageProvider):
    """
    Локальное хранилище файлов.

    Каталог раздается приложением по пути /uploads.
    """

    def __init__(self, base_path: Optional[str] = None):
        self.base_path = Path(base_path or settings.STORAGE_PATH)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _full_path(self, file_path: str) -> Path:
        full_path = (self.base_path / file_path).resolve()
        if self.base_path.resolve() not in full_path.parents:
            raise ValueError(f"Path escapes storage directory: {file_path}")
        return full_path

    def save_file(
        self, file_path: str, file_data: BinaryIO, content_type: Optional[str] = None
    ) -> bool:
        try:
            full_path = self._full_path(file_path)
            full_path.parent.mkdir(parents=True, exist_ok=True)

            with open(full_path, "wb") as f:
                shutil.copyfileobj(file_data, f)

            logger.info(f"Local storage: file saved to {full_path}")
            return True
        except (OSError, ValueError) as e:
            logger.error(f"Local storage: error saving file {file_path}: {e}")
            return False

    def delete_file(self, file_path: str) -> bool:
        try:
            full_path = self._full_path(file_path)
            if full_path.exists():
                full_path.unlink()
                logger.info(f"Local storage: file deleted {full_path}")
                return True
            return False
        except (OSError, ValueError) as e:
            logger.error(f"Local storage: error deleting file {file_path}: {e}")
            return False

    def file_exists(self, file_path: str) -> bool:
        try:
            return self._full_path(file_path).exists()
        except ValueError:
            return False


class S3StorageProvider(StorageProvider):
    """
    Хранилище Amazon S3 через boto3.
    """

    def __init__(self, bucket_name: str, endpoint_url: Optional[str] = None, client=None):
        self.bucket_name = bucket_name
        self.s3_client = client or boto3.client(
            "s3",
            endpoint_url=endpoint_url or None,
            region_name=settings.AWS_REGION,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
        )

    def save_file(
        self, file_path: str, file_data: BinaryIO, content_type: Optional[str] = None
    ) -> bool:
        extra_args = {}
        if content_type:
            extra_args["ContentType"] = content_type

        # Читаем содержимое, чтобы указать ContentLength (важно для MinIO)
        file_data.seek(0)
        file_content = file_data.read()
        extra_args["ContentLength"] = len(file_content)

        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=file_path,
                Body=BytesIO(file_content),
                **extra_args,
            )
            logger.info(f"S3 storage: file uploaded {self.bucket_name}/{file_path}")
            return True
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 storage: error saving file {file_path}: {e}")
            return False

    def delete_file(self, file_path: str) -> bool:
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=file_path)
            logger.info(f"S3 storage: file deleted {self.bucket_name}/{file_path}")
            return True
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 storage: error deleting file {file_path}: {e}")
            return False

    def file_exists(self, file_path: str) -> bool:
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=file_path)
            return True
        except ClientError:
            return False


# ======================= Создание экземпляра провайдера =======================

_storage_service: Optional[StorageProvider] = None


def create_storage_service() -> StorageProvider:
    """Создать провайдер по STORAGE_TYPE."""
    if settings.STORAGE_TYPE == "s3":
        logger.info(f"Using S3 storage, bucket: {settings.S3_BUCKET_NAME}")
        return S3StorageProvider(
            bucket_name=settings.S3_BUCKET_NAME,
            endpoint_url=settings.S3_ENDPOINT_URL,
        )
    logger.info(f"Using local storage at {settings.STORAGE_PATH}")
    return LocalStorageProvider()


def get_storage_service() -> StorageProvider:
    """Dependency: провайдер хранилища, создается при первом обращении."""
    global _storage_service
    if _storage_service is None:
        _storage_service = create_storage_service()
    return _storage_service
