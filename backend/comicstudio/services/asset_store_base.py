"""
Comic Studio Backend — Abstract Asset Store Interface
=======================================================

What:  Abstract base class defining the contract for the external image host.
How:   Concrete implementations inherit from AssetStore and implement the
       file lookup/deletion calls plus upload signing.
Who:   Called by AssetCleanupService (deletion) and the upload route (signing).

Implementations:
    - ImageKitClient: ImageKit REST API over httpx (default)
    - Tests pass AsyncMock(spec=AssetStore) or an ImageKitClient on an
      httpx.MockTransport.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class AssetStore(ABC):
    """
    Abstract interface for the service hosting uploaded comic images.

    Contract:
        - delete_file() removes one asset by its stable identifier
        - find_by_name() lists assets whose file name matches exactly
        - Transport and HTTP failures are raised as AssetStoreError
        - Callers decide whether a failure matters (cleanup never lets it
          reach the client)
    """

    @abstractmethod
    async def delete_file(self, file_id: str) -> None:
        """
        Delete one asset by identifier.

        Deleting an id that no longer exists may raise AssetStoreError
        (HTTP 404 upstream); callers treat that as non-fatal.
        """
        ...

    @abstractmethod
    async def find_by_name(self, name: str) -> List[Dict[str, Any]]:
        """
        Return the stored files whose name equals `name`.

        Each item carries at least a `fileId` key. Order is whatever the
        store returns; the caller picks the first match.
        """
        ...

    @abstractmethod
    def get_authentication_parameters(self) -> Dict[str, Any]:
        """
        Build short-lived signed parameters for a direct client upload.

        Returns a dict with `token`, `expire` and `signature`.
        Raises AssetStoreError when the store is not configured.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the asset store is reachable and the credentials work.

        Returns: True if reachable, False otherwise. Never raises.
        """
        ...
