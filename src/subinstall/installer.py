"""
Package install orchestration.

Install flow:
  1. Resolve --id / --package to a version key and validate it
  2. Check the target API version
  3. Fetch the version record (publish-wait retries)
  4. Confirmation gates: destructive upgrade type, external sites
  5. Build and submit the install request
  6. Poll the request until SUCCESS / ERROR or the budget runs out

Both waits suspend on the injected ``sleep`` coroutine; nothing blocks
the event loop and only one remote query is outstanding at a time.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from pydantic import BaseModel, Field

from .client import ResourceClient
from .config import MIN_API_VERSION, InstallerConfig
from .confirm import ConfirmationGate
from .errors import (
    CreationError,
    PromptDeniedError,
    RemoteInstallError,
    UnsupportedApiVersionError,
)
from .identifiers import (
    PACKAGE_INSTALL_REQUEST_ID,
    AliasStore,
    IdentifierResolver,
    validate_id,
)
from .messages import get_message
from .models import (
    ApexCompileType,
    InstallOutcome,
    InstallRequest,
    InstallResult,
    InstallStatus,
    PackageInstallRequest,
    SecurityType,
    UpgradeType,
)
from .polling import PollBudget, PollState, Sleeper
from .report import format_install_errors
from .request_builder import build_install_request
from .versions import SubscriberVersionFetcher

logger = logging.getLogger(__name__)

RESOURCE_TYPE = "PackageInstallRequest"


class InstallOptions(BaseModel):
    """Everything the user asked for on the command line."""

    version_id: Optional[str] = None
    package: Optional[str] = None
    installation_key: Optional[str] = None
    wait: Optional[float] = Field(default=None, ge=0, description="Install-poll budget, minutes")
    publish_wait: float = Field(default=0, ge=0, description="Publish-wait budget, minutes")
    upgrade_type: UpgradeType = UpgradeType.MIXED
    apex_compile: ApexCompileType = ApexCompileType.ALL
    security_type: SecurityType = SecurityType.ADMINS_ONLY
    no_prompt: bool = False


class PackageInstaller:
    """Drive one package install from flags to a final result.

    Args:
        client: Remote resource client for the target org.
        config: Installer configuration (API version, intervals, aliases).
        gate: Confirmation gate; defaults to a terminal prompt.
        aliases: Alias lookup; defaults to config + project aliases.
        sleep: Coroutine used for both wait phases.
    """

    def __init__(
        self,
        client: ResourceClient,
        config: Optional[InstallerConfig] = None,
        gate: Optional[ConfirmationGate] = None,
        aliases: Optional[AliasStore] = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._client = client
        self.config = config or InstallerConfig()
        self._gate = gate or ConfirmationGate()
        self._resolver = IdentifierResolver(
            aliases or AliasStore(config_aliases=self.config.package_aliases),
        )
        self._fetcher = SubscriberVersionFetcher(client, sleep=sleep)
        self._sleep = sleep

    def _check_api_version(self) -> None:
        if self.config.api_version_number < MIN_API_VERSION:
            raise UnsupportedApiVersionError(
                get_message("unsupportedApiVersion"), value=self.config.api_version,
            )

    async def install(self, options: InstallOptions) -> InstallResult:
        """Run the full install flow.

        Returns:
            InstallResult with outcome SUCCESS, or TIMED_OUT when the
            install budget ran out before a terminal status.

        Raises:
            ValidationError: Bad or conflicting identifiers, a non-numeric or
                too old API version.
            PromptDeniedError: The user declined the Delete upgrade type.
            CreationError: The server returned no request id.
            RemoteInstallError: The install request ended in ERROR.
        """
        version_key = self._resolver.resolve(options.version_id, options.package)
        self._check_api_version()

        install_budget = PollBudget.from_wait(options.wait, self.config.poll_interval_millis)
        publish_budget = PollBudget.from_wait(
            options.publish_wait, self.config.publish_poll_interval_millis,
        )

        version = await self._fetcher.fetch(version_key, options.installation_key, publish_budget)

        if options.upgrade_type == UpgradeType.DELETE and version.is_unlocked:
            if not await self._gate.confirm(get_message("promptUpgradeType"), options.no_prompt):
                raise PromptDeniedError(get_message("promptUpgradeTypeDeny"))

        enable_external_sites = False
        if version.trusted_sites:
            enable_external_sites = await self._gate.confirm(
                get_message("promptExternalSites", "\n".join(version.trusted_sites)),
                options.no_prompt,
            )

        request = build_install_request(
            version_key,
            version,
            security_type=options.security_type,
            upgrade_type=options.upgrade_type,
            apex_compile=options.apex_compile,
            installation_key=options.installation_key,
            enable_external_sites=enable_external_sites,
        )
        request_id = await self.submit(request)
        return await self.poll(request_id, install_budget)

    async def submit(self, request: InstallRequest) -> str:
        """Create the remote install request and return its id.

        Raises:
            CreationError: If the response carries no id.
        """
        logger.info("Submitting install request for %s", request.subscriber_package_version_key)
        response = await self._client.create(RESOURCE_TYPE, request.to_payload())
        request_id = (response or {}).get("id")
        if not request_id:
            raise CreationError(
                get_message("createFailed", request.subscriber_package_version_key),
            )
        return request_id

    async def poll(self, request_id: str, budget: PollBudget) -> InstallResult:
        """Poll an install request until it settles or the budget is spent.

        A spent budget is not an error: the last record comes back with
        outcome TIMED_OUT so the caller can tell the user to check later.

        Raises:
            RemoteInstallError: If the request reaches status ERROR.
        """
        state = PollState(request_id=request_id, budget=budget)
        while True:
            record = PackageInstallRequest.model_validate(
                await self._client.retrieve(RESOURCE_TYPE, request_id),
            )
            state.observe(record)

            if record.status == InstallStatus.SUCCESS.value:
                return InstallResult(request=record, outcome=InstallOutcome.SUCCESS)

            if record.status == InstallStatus.ERROR.value:
                message = format_install_errors(state.errors)
                logger.error("Encountered errors installing the package! %s", message)
                raise RemoteInstallError(message, state.errors)

            if state.budget.exhausted:
                logger.debug(
                    "Install request %s still %s after poll budget ran out",
                    request_id, record.status,
                )
                return InstallResult(request=record, outcome=InstallOutcome.TIMED_OUT)

            logger.info(get_message("installStatus", record.status))
            await self._sleep(state.budget.interval_seconds)
            state.budget.consume()

    async def report(self, request_id: str, wait: Optional[float] = None) -> InstallResult:
        """Check on an existing install request, optionally waiting for it."""
        validate_id(PACKAGE_INSTALL_REQUEST_ID, request_id)
        self._check_api_version()
        budget = PollBudget.from_wait(wait, self.config.poll_interval_millis)
        return await self.poll(request_id, budget)
