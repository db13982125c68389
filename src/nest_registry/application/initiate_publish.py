"""Use case for opening a publish session."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from enum import Enum

from nest_registry.application.access import require_publisher
from nest_registry.application.dto.publish import PublishRequest, parse_publish_request
from nest_registry.application.ports.catalog import CatalogPort
from nest_registry.application.ports.name_policy import NamePolicyPort
from nest_registry.application.tokens import TokenGenerator
from nest_registry.domain.package import User, has_reserved_characters
from nest_registry.domain.publish import PublishSession
from nest_registry.domain.versioning import DEFAULT_VERSION, normalize_version
from nest_registry.errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NameBlockedError,
)

logger = logging.getLogger("nest_registry.publish")


class ExistingPackagePolicy(str, Enum):
    """How to treat ``update=false`` for a name that is already registered."""

    ALLOW = "allow"
    REJECT = "reject"


class PublishInitiator:
    """Validates publish requests against the catalog and opens sessions."""

    def __init__(
        self,
        *,
        catalog: CatalogPort,
        name_policy: NamePolicyPort,
        tokens: TokenGenerator,
        existing_package_policy: ExistingPackagePolicy = ExistingPackagePolicy.ALLOW,
        default_version: str = DEFAULT_VERSION,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._catalog = catalog
        self._name_policy = name_policy
        self._tokens = tokens
        self._existing_package_policy = existing_package_policy
        self._default_version = default_version
        self._clock = clock or (lambda: datetime.now(UTC))

    async def initiate(
        self,
        request: PublishRequest | Mapping[str, object],
        user: User | None,
        credential: str | None,
    ) -> str:
        """Open a session for ``request`` and return its token."""
        publisher, api_key = require_publisher(user, credential)
        if not isinstance(request, PublishRequest):
            request = parse_publish_request(request)

        name = request.name
        if not name or has_reserved_characters(name):
            raise BadRequestError("package name must not be empty or contain '@' or whitespace")
        if not self._name_policy.is_allowed(name):
            logger.warning(
                "publish blocked by name policy",
                extra={"data": {"package": name, "owner_id": publisher.user_id}},
            )
            raise NameBlockedError()

        raw_version = request.version if request.version is not None else self._default_version
        version = normalize_version(raw_version)
        if version is None:
            raise BadRequestError(f"version {raw_version!r} is not a valid semantic version")

        await self._check_catalog(name, version, request.update, publisher)

        now = self._clock()
        session = self._tokens.issue(
            lambda token: PublishSession(
                token=token,
                package_name=name,
                target_version=version,
                is_update=request.update,
                description=request.description,
                owner_id=publisher.user_id,
                credential=api_key,
                created_at=now,
                last_activity_at=now,
            )
        )
        logger.info(
            "publish session opened",
            extra={
                "data": {
                    "token": session.token,
                    "package": name,
                    "version": version,
                    "update": request.update,
                    "owner_id": publisher.user_id,
                }
            },
        )
        return session.token

    async def _check_catalog(self, name: str, version: str, update: bool, publisher: User) -> None:
        existing = await self._catalog.get_package(name)
        if existing is None:
            return
        if update:
            if existing.owner != publisher.user_id:
                raise ForbiddenError(f"{publisher.user_id!r} does not own package {name!r}")
        elif self._existing_package_policy is ExistingPackagePolicy.REJECT:
            raise ConflictError(f"package {name!r} already exists; publish with update=true")
        if existing.has_version(version):
            raise ConflictError(f"{name}@{version} has already been published")


__all__ = ["ExistingPackagePolicy", "PublishInitiator"]
