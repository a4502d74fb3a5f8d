"""Team and project listing with page-number continuation."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from frameio_sync.frameio.models import (
    Continuation,
    Project,
    SyncResult,
    Team,
    parse_project,
    parse_team,
)

if TYPE_CHECKING:
    from frameio_sync.frameio.client import FrameioClient

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100


class ProjectLister:
    """Lists teams and pages through their projects one page per invocation."""

    def __init__(self, client: FrameioClient, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self._client = client
        self._page_size = page_size

    async def list_teams(self) -> list[Team]:
        """Return every team visible to the connected account."""
        response = await self._client.get("/teams")
        return [parse_team(raw) for raw in response or []]

    async def fetch_team_page(self, team_id: str, page: int) -> list[Project]:
        """Fetch one page of a team's projects."""
        params: dict[str, Any] = {"page": page, "page_size": self._page_size}
        response = await self._client.get(f"/teams/{team_id}/projects", params=params)
        return [parse_project(raw) for raw in response or []]

    async def list_projects(
        self,
        team_ids: list[str] | None = None,
        continuation: Continuation | None = None,
    ) -> SyncResult:
        """Return one merged page of projects across teams.

        Every team is read at the same page number. If any team filled its
        page, the page number advances for all teams on the next invocation;
        teams that ran out earlier simply return empty pages. There is no
        per-team cursor.

        Args:
            team_ids: Teams to list; empty or None means all visible teams.
            continuation: State from the previous invocation, or None to start.

        Returns:
            SyncResult with project rows and the next continuation, or no
            continuation once every team is exhausted.
        """
        page = (continuation or Continuation()).page
        if not team_ids:
            team_ids = [team.team_id for team in await self.list_teams()]

        pages = await asyncio.gather(
            *(self.fetch_team_page(team_id, page) for team_id in team_ids)
        )

        rows = [project.to_row() for team_page in pages for project in team_page]
        more = any(len(team_page) >= self._page_size for team_page in pages)
        next_continuation = Continuation(page=page + 1) if more else None

        logger.info(
            "[list_projects] fetched page; page:%d;team_count:%d;project_count:%d;more:%s",
            page,
            len(team_ids),
            len(rows),
            more,
        )
        return SyncResult(result=rows, continuation=next_continuation)
