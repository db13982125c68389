"""Use case for committing a completed publish session."""

from __future__ import annotations

import asyncio
import logging
import time

from nest_registry.application.dto.publish import FinalizedUpload
from nest_registry.application.ports.catalog import CatalogPort
from nest_registry.application.ports.content_store import ContentStorePort
from nest_registry.domain.package import UploadDraft
from nest_registry.domain.publish import PublishSession
from nest_registry.errors import ConflictError, FinalizationError

logger = logging.getLogger("nest_registry.finalize")


class PublishFinalizer:
    """Pushes staged pieces to the content store and records the version.

    The catalog is only written once every piece has a reference; a single
    failed submission cancels the rest and aborts the publish.
    """

    def __init__(self, *, content_store: ContentStorePort, catalog: CatalogPort) -> None:
        self._content_store = content_store
        self._catalog = catalog

    async def finalize(self, session: PublishSession) -> FinalizedUpload:
        start = time.monotonic()
        references = await self._store_pieces(session)
        file_map = {name: references[name] for name in session.pieces}
        draft = UploadDraft(
            version=session.target_version,
            description=session.description,
            file_map=file_map,
        )
        try:
            await self._catalog.create_upload(
                session.package_name,
                session.is_update,
                session.owner_id,
                draft,
            )
        except ConflictError:
            # Another session committed the same version first.
            logger.info("publish lost version race", extra={"data": _describe(session)})
            raise
        except Exception as exc:
            logger.exception(
                "catalog write failed",
                extra={"data": _describe(session)},
            )
            raise FinalizationError(
                f"catalog rejected {session.package_name}@{session.target_version}: {exc}",
                package_name=session.package_name,
                version=session.target_version,
            ) from exc

        logger.info(
            "publish finalized",
            extra={
                "data": {
                    **_describe(session),
                    "elapsed_s": round(time.monotonic() - start, 3),
                }
            },
        )
        return FinalizedUpload(
            package_name=session.package_name,
            version=session.target_version,
            file_map=file_map,
        )

    async def _store_pieces(self, session: PublishSession) -> dict[str, str]:
        references: dict[str, str] = {}
        failed: list[str] = []

        async def submit(name: str, content: str) -> None:
            try:
                references[name] = await self._content_store.put(content)
            except Exception:
                failed.append(name)
                raise

        try:
            async with asyncio.TaskGroup() as group:
                for name, content in session.pieces.items():
                    group.create_task(submit(name, content), name=f"publish-piece:{name}")
        except ExceptionGroup as exc:
            logger.error(
                "piece submission failed",
                extra={"data": {**_describe(session), "failed_pieces": sorted(failed)}},
                exc_info=exc.exceptions[0],
            )
            raise FinalizationError(
                f"{len(failed)} piece(s) of {session.package_name}@{session.target_version} "
                f"could not be stored: {exc.exceptions[0]}",
                package_name=session.package_name,
                version=session.target_version,
                failed_pieces=sorted(failed),
            ) from exc
        return references


def _describe(session: PublishSession) -> dict[str, object]:
    return {
        "token": session.token,
        "package": session.package_name,
        "version": session.target_version,
        "update": session.is_update,
        "piece_count": len(session.pieces),
    }


__all__ = ["PublishFinalizer"]
