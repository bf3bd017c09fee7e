"""Abstract base class for VRM API clients."""

from __future__ import annotations

from abc import ABC, abstractmethod

from vrm.models import Installation, User


class BaseVRMClient(ABC):
    """Common interface for mock and real VRM clients."""

    @abstractmethod
    async def ensure_user_id(self) -> int:
        """Return the logged-in user's numeric id, fetching it once if unknown."""
        ...

    @abstractmethod
    async def get_user_info(self) -> User:
        """Get id, name, email and country of the logged-in user."""
        ...

    @abstractmethod
    async def add_new_site(self, identifier: str) -> str:
        """Add an installation to the user's account by its VRM portal id.

        The API emails a confirmation to the user as a side effect.

        Returns:
            The new site's id.
        """
        ...

    @abstractmethod
    async def get_all_installations_or_sites(self, extended: bool) -> list[Installation]:
        """Get every installation visible to the user, in the API's order.

        Args:
            extended: Include the extended telemetry list on each record.
        """
        ...

    @abstractmethod
    async def get_installation_or_site(self, extended: bool, site_id: int) -> Installation:
        """Get a single installation by site id.

        Raises:
            VRMProtocolError: "no_installation" if the API returns no record.
        """
        ...

    async def close(self) -> None:
        """Clean up resources. Override if needed."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
