"""Abstract contract for remote object storage."""

from abc import ABC, abstractmethod

from core.models.auth import AccessToken


class ObjectStorageRepository(ABC):
    """Contract for reading and writing stored objects by path.

    Implementations could be Dropbox, S3, local disk, etc.
    Services depend on this interface, not the implementation.
    """

    @abstractmethod
    def download(self, *, access_token: AccessToken, path: str) -> bytes:
        """Download an object's content.

        Args:
            access_token: Bearer token for the call
            path: POSIX-style path with a leading slash

        Returns:
            Raw object bytes

        Raises:
            NotFoundError: If nothing is stored at ``path``
            StoreError: If the download fails for any other reason
        """

    @abstractmethod
    def upload(
        self,
        *,
        access_token: AccessToken,
        path: str,
        content: bytes,
        mute: bool = False,
    ) -> int:
        """Store ``content`` at ``path``, overwriting any existing object.

        Args:
            access_token: Bearer token for the call
            path: POSIX-style path with a leading slash
            content: Bytes to store
            mute: Suppress client notifications where supported

        Returns:
            Number of attempts the write took

        Raises:
            WriteError: If the write cannot be completed
        """
