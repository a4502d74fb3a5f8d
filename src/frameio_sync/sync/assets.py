"""Asset tree walker — level-order discovery of a project's assets."""

from __future__ import annotations

import asyncio
import logging
import math
from typing import TYPE_CHECKING, Any

from frameio_sync.frameio.models import (
    ASSET_TYPE_VERSION_STACK,
    ASSET_TYPE_VERSION_STACK_LABEL,
    FIELD_COMMENT_COUNT,
    FIELD_FPS,
    FIELD_ID,
    FIELD_INSERTED_AT,
    FIELD_ITEM_COUNT,
    FIELD_NAME,
    FIELD_PARENT_ID,
    FIELD_PROJECT_ID,
    FIELD_ROOT_ASSET_ID,
    FIELD_THUMB,
    FIELD_TYPE,
    FIELD_UPDATED_AT,
    PROJECT_ROOT_NAME,
    UNRESOLVED_ASSET_NAME,
    Asset,
    AssetReference,
)

if TYPE_CHECKING:
    from frameio_sync.frameio.client import FrameioClient

logger = logging.getLogger(__name__)


class AssetTreeWalker:
    """Flattens a project's asset hierarchy by breadth-first expansion."""

    def __init__(self, client: FrameioClient) -> None:
        self._client = client

    async def get_root_asset_id(self, project_id: str) -> str:
        """Resolve a project's root asset ID via ``GET /projects/{id}``.

        Raises:
            ValueError: If the project has no root asset.
        """
        project = await self._client.get(f"/projects/{project_id}")
        root_asset_id = (project or {}).get(FIELD_ROOT_ASSET_ID)
        if not root_asset_id:
            raise ValueError(f"Project {project_id} has no root asset")
        return str(root_asset_id)

    async def list_children(self, asset_id: str, root_asset_id: str) -> list[Asset]:
        """Fetch the direct children of one asset.

        Args:
            asset_id: The container whose children to list.
            root_asset_id: The project's root asset, used to flag root-level items.

        Returns:
            The children as Asset objects; empty when the container is empty.
        """
        response = await self._client.get(f"/assets/{asset_id}/children")
        return [self._parse_asset(raw, root_asset_id) for raw in response or []]

    async def walk(self, project_id: str) -> list[Asset]:
        """Return every asset reachable from the project's root.

        The tree is expanded one level at a time: all containers on the
        current frontier are fetched concurrently, the results are joined and
        appended, and the containers among them become the next frontier.
        Every asset of level N is therefore in the result before any asset of
        level N+1. Order between sibling containers of one level is not
        meaningful.

        A failed fetch for any container aborts the whole walk.

        Args:
            project_id: The project to walk.

        Returns:
            Flattened list of assets annotated with their parent reference.
        """
        root_asset_id = await self.get_root_asset_id(project_id)
        logger.info(
            "[walk] resolved root asset; project_id:%s;root_asset_id:%s",
            project_id,
            root_asset_id,
        )

        result = await self.list_children(root_asset_id, root_asset_id)
        frontier = [asset for asset in result if asset.is_container]
        depth = 0

        while frontier:
            depth += 1
            batches = await asyncio.gather(
                *(self.list_children(c.asset_id, root_asset_id) for c in frontier)
            )
            level = [asset for batch in batches for asset in batch]
            result.extend(level)
            logger.info(
                "[walk] expanded level; depth:%d;containers:%d;assets:%d",
                depth,
                len(frontier),
                len(level),
            )
            frontier = [asset for asset in level if asset.is_container]

        for asset in result:
            if asset.project_id is None:
                asset.project_id = project_id
        logger.info("[walk] complete; project_id:%s;asset_count:%d", project_id, len(result))
        return result

    @staticmethod
    def _parse_asset(raw: dict[str, Any], root_asset_id: str) -> Asset:
        """Map a raw Frame.io asset dict to an Asset dataclass."""
        parent_id = raw.get(FIELD_PARENT_ID) or ""
        is_in_project_root = parent_id == root_asset_id
        parent = AssetReference(
            asset_id=parent_id,
            name=PROJECT_ROOT_NAME if is_in_project_root else UNRESOLVED_ASSET_NAME,
        )
        asset_type = raw.get(FIELD_TYPE, "")
        if asset_type == ASSET_TYPE_VERSION_STACK:
            asset_type = ASSET_TYPE_VERSION_STACK_LABEL
        return Asset(
            asset_id=raw.get(FIELD_ID, ""),
            name=raw.get(FIELD_NAME, ""),
            type=asset_type,
            parent=parent,
            is_in_project_root=is_in_project_root,
            comment_count=raw.get(FIELD_COMMENT_COUNT) or 0,
            item_count=raw.get(FIELD_ITEM_COUNT) or 0,
            thumbnail_url=raw.get(FIELD_THUMB),
            created_at=raw.get(FIELD_INSERTED_AT),
            updated_at=raw.get(FIELD_UPDATED_AT),
            fps=_parse_fps(raw.get(FIELD_FPS)),
            project_id=raw.get(FIELD_PROJECT_ID),
        )


def _parse_fps(value: Any) -> float | None:
    """Coerce a remote frame rate to float; None when absent or not a finite number."""
    try:
        fps = float(value)
    except (TypeError, ValueError):
        return None
    return fps if math.isfinite(fps) else None


def resolve_parent_names(assets: list[Asset]) -> list[Asset]:
    """Fill placeholder parent names by joining on asset ID within the list.

    The walker leaves nested parents unresolved; callers that want names can
    run this join over the flattened result. Parents absent from the list
    keep their placeholder.

    Args:
        assets: Flattened walker output.

    Returns:
        The same list, with parent references replaced where a match exists.
    """
    names = {asset.asset_id: asset.name for asset in assets}
    for asset in assets:
        if asset.is_in_project_root:
            continue
        name = names.get(asset.parent.asset_id)
        if name is not None:
            asset.parent = AssetReference(asset_id=asset.parent.asset_id, name=name)
    return assets
