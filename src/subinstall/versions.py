"""
Subscriber package version lookup with publish-wait.

A freshly promoted version can take a while to replicate to the target
instance. Until then the server either does not find it or reports
``InstallValidationStatus = PACKAGE_UNAVAILABLE``. The fetcher retries on
a fixed interval until the version is ready or the budget is spent.
Running out of budget is not an error: the last record is returned and
the install itself is left to fail if the version really is unusable.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .client import ResourceClient, ResourceNotFoundError
from .messages import get_message
from .models import SubscriberPackageVersion
from .polling import PollBudget, Sleeper

logger = logging.getLogger(__name__)

RESOURCE_TYPE = "SubscriberPackageVersion"
VERSION_FIELDS = (
    "Id",
    "SubscriberPackageId",
    "InstallValidationStatus",
    "RemoteSiteSettings",
    "CspTrustedSites",
    "Package2ContainerOptions",
)


class SubscriberVersionFetcher:
    """Fetch a version record, waiting for it to be published.

    Args:
        client: Remote resource client.
        sleep: Coroutine used to wait between attempts.
    """

    def __init__(self, client: ResourceClient, sleep: Sleeper = asyncio.sleep) -> None:
        self._client = client
        self._sleep = sleep

    async def _fetch_once(
        self, version_id: str, installation_key: Optional[str],
    ) -> SubscriberPackageVersion:
        criteria = {"InstallationKey": installation_key} if installation_key else None
        record = await self._client.retrieve(
            RESOURCE_TYPE, version_id, fields=VERSION_FIELDS, criteria=criteria,
        )
        return SubscriberPackageVersion.from_record(record)

    async def fetch(
        self,
        version_id: str,
        installation_key: Optional[str],
        budget: PollBudget,
    ) -> SubscriberPackageVersion:
        """Return the version record once it is publish-ready.

        Args:
            version_id: Resolved subscriber package version id.
            installation_key: Key for protected packages, if any.
            budget: Publish-wait budget; consumed in place.

        Returns:
            The ready record, or the last one seen when the budget ran out.

        Raises:
            ResourceNotFoundError: If the version never showed up and the
                budget is spent.
        """
        while True:
            try:
                version = await self._fetch_once(version_id, installation_key)
            except ResourceNotFoundError:
                if budget.exhausted:
                    raise
                version = None

            if version is not None and (version.publish_ready or budget.exhausted):
                if not version.publish_ready:
                    logger.warning(
                        "Package %s still not published; continuing with install", version_id,
                    )
                return version

            logger.info(get_message("publishWaitProgress", version_id, budget.retries))
            await self._sleep(budget.interval_seconds)
            budget.consume()
