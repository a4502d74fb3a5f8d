"""Connector — the sync and update formulas exposed to the document host."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from frameio_sync.frameio.client import FrameioClient, frameio_client_from_config
from frameio_sync.frameio.models import FIELD_EMAIL, Continuation, SyncResult
from frameio_sync.sync.assets import AssetTreeWalker
from frameio_sync.sync.comments import CommentAggregator, ThreadingMode
from frameio_sync.sync.projects import DEFAULT_PAGE_SIZE, ProjectLister
from frameio_sync.sync.review_links import ReviewLinkSync

if TYPE_CHECKING:
    from frameio_sync.config import AppConfig

logger = logging.getLogger(__name__)

KEY_NEW_VALUE = "newValue"


def _first_new_value(updates: list[dict[str, Any]]) -> dict[str, Any]:
    """Pick the new row of the first update pair; later pairs are ignored."""
    if not updates:
        raise ValueError("No updates supplied")
    if len(updates) > 1:
        logger.warning(
            "[_first_new_value] only the first update is applied; update_count:%d",
            len(updates),
        )
    new_value = updates[0].get(KEY_NEW_VALUE)
    if not isinstance(new_value, dict):
        raise ValueError(f"Update is missing '{KEY_NEW_VALUE}'")
    return new_value


def _row_id(row: dict[str, Any], key: str) -> str:
    value = row.get(key)
    if not value:
        raise ValueError(f"Updated row is missing '{key}'")
    return str(value)


class FrameioConnector:
    """Wires the sync components into the host's formulas.

    Each sync formula returns a ``SyncResult`` (rows plus optional
    continuation); each update formula returns ``{"result": [row]}``.
    """

    def __init__(
        self,
        client: FrameioClient,
        page_size: int = DEFAULT_PAGE_SIZE,
        threading: ThreadingMode = ThreadingMode.FINAL_PASS,
    ) -> None:
        """Initialise the connector.

        Args:
            client: Authenticated FrameioClient shared by every component.
            page_size: Projects requested per team page.
            threading: Reply threading mode for the comment sync.
        """
        self._client = client
        self._walker = AssetTreeWalker(client)
        self._comments = CommentAggregator(client, threading)
        self._projects = ProjectLister(client, page_size)
        self._review_links = ReviewLinkSync(client)

    async def __aenter__(self) -> FrameioConnector:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self._client.aclose()

    async def get_connection_name(self) -> str:
        """Return the connected account's email, used as the connection name."""
        me = await self._client.get("/me")
        return str((me or {}).get(FIELD_EMAIL, ""))

    async def sync_teams(self) -> SyncResult:
        teams = await self._projects.list_teams()
        return SyncResult(result=[team.to_row() for team in teams])

    async def sync_projects(
        self,
        team_id: str | None = None,
        continuation: Continuation | None = None,
    ) -> SyncResult:
        """Sync one page of projects for a team, or for every visible team."""
        team_ids = [team_id] if team_id else []
        return await self._projects.list_projects(team_ids, continuation)

    async def sync_team_projects(
        self,
        team_ids: list[str],
        continuation: Continuation | None = None,
    ) -> SyncResult:
        """Sync one merged page of projects across several teams."""
        return await self._projects.list_projects(list(team_ids), continuation)

    async def sync_assets(self, project_id: str) -> SyncResult:
        assets = await self._walker.walk(project_id)
        return SyncResult(result=[asset.to_row() for asset in assets])

    async def sync_comments(self, project_id: str) -> SyncResult:
        """Walk the project's assets, then aggregate comments on them."""
        assets = await self._walker.walk(project_id)
        comments = await self._comments.aggregate(assets)
        return SyncResult(result=[comment.to_row() for comment in comments])

    async def sync_review_links(self, project_id: str) -> SyncResult:
        links = await self._review_links.list_review_links(project_id)
        return SyncResult(result=[link.to_row() for link in links])

    async def update_project(self, project_id: str, name: str | None) -> dict[str, Any]:
        project = await self._review_links.update_project(project_id, name)
        return project.to_row()

    async def update_review_link(
        self,
        review_link_id: str,
        name: str | None = None,
        allow_downloading: bool | None = None,
        is_active: bool | None = None,
        view_all_versions: bool | None = None,
    ) -> dict[str, Any]:
        link = await self._review_links.update_review_link(
            review_link_id,
            name=name,
            allow_downloading=allow_downloading,
            is_active=is_active,
            view_all_versions=view_all_versions,
        )
        return link.to_row()

    async def execute_project_update(self, updates: list[dict[str, Any]]) -> dict[str, Any]:
        """Apply an edited project row from the host (first pair only)."""
        row = _first_new_value(updates)
        updated = await self.update_project(_row_id(row, "projectId"), row.get("name"))
        return {"result": [updated]}

    async def execute_review_link_update(self, updates: list[dict[str, Any]]) -> dict[str, Any]:
        """Apply an edited review link row from the host (first pair only)."""
        row = _first_new_value(updates)
        updated = await self.update_review_link(
            _row_id(row, "reviewLinkId"),
            name=row.get("name"),
            allow_downloading=row.get("allowDownloading"),
            is_active=row.get("isActive"),
            view_all_versions=row.get("viewAllVersions"),
        )
        return {"result": [updated]}


def connector_from_config(config: AppConfig, access_token: str | None = None) -> FrameioConnector:
    """Construct a FrameioConnector from application configuration.

    Args:
        config: Application configuration instance.
        access_token: Bearer token forwarded by the host, if any.

    Returns:
        Configured FrameioConnector instance.
    """
    client = frameio_client_from_config(config, access_token)
    return FrameioConnector(
        client=client,
        page_size=config.page_size,
        threading=ThreadingMode(config.comment_threading),
    )
