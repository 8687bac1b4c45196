from abc import ABC, abstractmethod
from typing import List, Optional

from sitewatch.contracts.site import SiteStatus


class Registry(ABC):
    """
    Abstract base class for site registry implementations.
    """

    @abstractmethod
    async def get(self, url: str) -> Optional[SiteStatus]:
        """
        Look up the current record of a site by its exact URL.

        Args:
            url (str): The URL the site was registered with.

        Returns:
            Optional[SiteStatus]: The current record, or None if the URL is unknown.
        """

    @abstractmethod
    async def update(self, status: SiteStatus) -> bool:
        """
        Replace the record of an already registered site.

        Args:
            status (SiteStatus): The new record; ``status.url`` selects the site.

        Returns:
            bool: True if the site was found and replaced, False if not found.
        """

    @abstractmethod
    async def list_sites(self) -> List[SiteStatus]:
        """
        Return a snapshot of every site record, in registration order.

        Returns:
            List[SiteStatus]: Current records.
        """

    @abstractmethod
    async def list_urls(self) -> List[str]:
        """
        Return the URLs of every registered site, in registration order.

        Returns:
            List[str]: Registered URLs.
        """
