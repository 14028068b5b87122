from abc import ABC, abstractmethod


class StorageBackend(ABC):
    @abstractmethod
    def save(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        """Save data and return the storage path/URL."""
        ...

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Retrieve file data by key."""
        ...

    @abstractmethod
    def get_url(self, key: str) -> str:
        """Return a presigned URL (S3) or absolute file path (local)."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete one object. Missing keys are not an error."""
        ...

    @abstractmethod
    def delete_prefix(self, prefix: str) -> int:
        """Delete every object under a folder prefix. Returns how many were removed."""
        ...
