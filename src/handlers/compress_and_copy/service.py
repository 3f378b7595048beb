"""Business logic for the compress-and-copy operation.

Downloads an image, cover-crops it to the fixed target canvas, and uploads
the re-encoded result into a sibling ``SIR`` directory.
"""

from aws_lambda_powertools import Logger

from core.imaging.transformer import ImageTransformer
from core.models.auth import AccessToken
from core.repositories.storage_repository import ObjectStorageRepository
from core.utils.constants import COMPRESSED_DIR_NAME, format_file_size

from .models import CompressResponse

logger = Logger(UTC=True)


def build_source_path(path: str) -> str:
    """Return the absolute storage path for a root-relative ``path``."""
    return f"/{path}"


def build_compressed_path(path: str) -> str:
    """Insert the ``SIR`` directory immediately before the filename.

    Example:
        "listings/42/house.jpg" -> "/listings/42/SIR/house.jpg"
        "house.jpg"             -> "/SIR/house.jpg"

    A path ending in a slash has no filename and is returned unchanged.
    """
    directory, separator, filename = path.rpartition("/")
    if not filename:
        return build_source_path(path)

    return f"/{directory}{separator}{COMPRESSED_DIR_NAME}/{filename}"


class CompressService:
    """Application service for compress-and-copy.

    This service orchestrates:
    - Downloading the source image
    - Transforming it to the target geometry
    - Uploading the result through the retrying writer
    """

    def __init__(
        self,
        storage: ObjectStorageRepository,
        transformer: ImageTransformer | None = None,
    ) -> None:
        self.storage = storage
        self.transformer = transformer or ImageTransformer()

    def compress_and_copy(self, *, access_token: AccessToken, path: str) -> CompressResponse:
        """Create the compressed copy of ``path``.

        Raises:
            NotFoundError: If the source image does not exist
            StoreError: If the download fails
            TransformError: If the image cannot be processed
            WriteError: If the upload fails
        """
        source_path = build_source_path(path)
        target_path = build_compressed_path(path)

        logger.debug(
            "Starting compress-and-copy",
            extra={"source": source_path, "target": target_path},
        )

        original = self.storage.download(access_token=access_token, path=source_path)
        result = self.transformer.transform(original)

        attempts = self.storage.upload(
            access_token=access_token,
            path=target_path,
            content=result.content,
            mute=False,
        )

        logger.info(
            "Compressed copy stored",
            extra={
                "source": source_path,
                "target": target_path,
                "mime_type": result.mime_type,
                "original_size": format_file_size(len(original)),
                "compressed_size": format_file_size(len(result.content)),
                "upload_attempts": attempts,
            },
        )

        return CompressResponse(source=source_path, compressed=target_path)
