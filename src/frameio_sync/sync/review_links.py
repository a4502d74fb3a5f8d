"""Review link listing and partial updates, plus project renames."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from frameio_sync.frameio.models import (
    FIELD_CURRENT_VERSION_ONLY,
    FIELD_ENABLE_DOWNLOADING,
    FIELD_IS_ACTIVE,
    FIELD_NAME,
    Project,
    ReviewLink,
    parse_project,
    parse_review_link,
)

if TYPE_CHECKING:
    from frameio_sync.frameio.client import FrameioClient

logger = logging.getLogger(__name__)


def build_review_link_update(
    name: str | None = None,
    allow_downloading: bool | None = None,
    is_active: bool | None = None,
    view_all_versions: bool | None = None,
) -> dict[str, Any]:
    """Build a PUT body holding only the fields that were supplied.

    ``view_all_versions`` maps to the inverse remote flag
    ``current_version_only``.
    """
    body: dict[str, Any] = {}
    if name is not None:
        body[FIELD_NAME] = name
    if allow_downloading is not None:
        body[FIELD_ENABLE_DOWNLOADING] = allow_downloading
    if is_active is not None:
        body[FIELD_IS_ACTIVE] = is_active
    if view_all_versions is not None:
        body[FIELD_CURRENT_VERSION_ONLY] = not view_all_versions
    return body


class ReviewLinkSync:
    """Reads review links and applies the connector's update actions."""

    def __init__(self, client: FrameioClient) -> None:
        self._client = client

    async def list_review_links(self, project_id: str) -> list[ReviewLink]:
        """List a project's review links via ``GET /projects/{id}/review_links``."""
        response = await self._client.get(f"/projects/{project_id}/review_links")
        links = [parse_review_link(raw) for raw in response or []]
        logger.info(
            "[list_review_links] fetched; project_id:%s;link_count:%d",
            project_id,
            len(links),
        )
        return links

    async def update_review_link(
        self,
        review_link_id: str,
        name: str | None = None,
        allow_downloading: bool | None = None,
        is_active: bool | None = None,
        view_all_versions: bool | None = None,
    ) -> ReviewLink:
        """Send a partial update and return the re-projected review link.

        Args:
            review_link_id: The review link to update.
            name: New display name.
            allow_downloading: Whether viewers may download files.
            is_active: Whether the link is enabled.
            view_all_versions: Whether previous versions in stacks are visible.

        Returns:
            The updated ReviewLink as reported by Frame.io.

        Raises:
            ValueError: If no field was supplied.
        """
        body = build_review_link_update(name, allow_downloading, is_active, view_all_versions)
        if not body:
            raise ValueError(f"No fields supplied to update review link {review_link_id}")
        response = await self._client.put(f"/review_links/{review_link_id}", body)
        logger.info(
            "[update_review_link] updated; review_link_id:%s;fields:%s",
            review_link_id,
            ",".join(sorted(body)),
        )
        return parse_review_link(response or {})

    async def update_project(self, project_id: str, name: str | None) -> Project:
        """Rename a project via ``PUT /projects/{id}``.

        Raises:
            ValueError: If no name was supplied.
        """
        if name is None:
            raise ValueError(f"No name supplied to update project {project_id}")
        response = await self._client.put(f"/projects/{project_id}", {FIELD_NAME: name})
        logger.info("[update_project] renamed; project_id:%s", project_id)
        return parse_project(response or {})
