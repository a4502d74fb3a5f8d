"""Comment aggregator — per-asset comment fetch and reply threading."""

from __future__ import annotations

import asyncio
import enum
import logging
import math
from typing import TYPE_CHECKING, Any

from frameio_sync.frameio.models import (
    FIELD_ASSET_ID,
    FIELD_COMPLETED,
    FIELD_EMAIL,
    FIELD_ID,
    FIELD_INSERTED_AT,
    FIELD_NAME,
    FIELD_OWNER,
    FIELD_PARENT_ID,
    FIELD_TEXT,
    FIELD_TIMESTAMP,
    FIELD_UPDATED_AT,
    UNRESOLVED_COMMENT_TEXT,
    Asset,
    Comment,
    CommentReference,
)
from frameio_sync.sync.timecode import format_timecode

if TYPE_CHECKING:
    from frameio_sync.frameio.client import FrameioClient

logger = logging.getLogger(__name__)


class ThreadingMode(enum.Enum):
    """When reply links are resolved across the synced comment batch."""

    # One pass once every asset's comments are in.
    FINAL_PASS = "final_pass"
    # Re-scan the accumulated comments as each later batch arrives and thread
    # each batch within itself. Replies in the last batch never reach comments
    # from earlier batches.
    PER_BATCH = "per_batch"


def seconds_from_frames(timestamp: Any, fps: float | None) -> float | None:
    """Convert a frame offset to seconds; None when either side is unusable."""
    if timestamp is None or not fps:
        return None
    try:
        rate = float(fps)
        seconds = float(timestamp) / rate
    except (TypeError, ValueError, ZeroDivisionError):
        return None
    if not (math.isfinite(rate) and math.isfinite(seconds)):
        return None
    return seconds


def thread_replies(comments: list[Comment]) -> None:
    """Populate ``replies`` on every comment referenced by a reply in the list.

    Replaces any previous ``replies`` so repeated scans never duplicate stubs.
    """
    replies_by_parent: dict[str, list[CommentReference]] = {}
    for comment in comments:
        if comment.replying_to is not None:
            replies_by_parent.setdefault(comment.replying_to.comment_id, []).append(
                comment.reference()
            )
    for comment in comments:
        comment.replies = list(replies_by_parent.get(comment.comment_id, []))


class CommentAggregator:
    """Collects all comments on the commented assets of a walked project."""

    def __init__(
        self,
        client: FrameioClient,
        threading: ThreadingMode = ThreadingMode.FINAL_PASS,
    ) -> None:
        self._client = client
        self._threading = threading

    async def fetch_comments(self, asset_id: str) -> list[dict[str, Any]]:
        """Fetch the raw comments on one asset via ``GET /assets/{id}/comments``."""
        response = await self._client.get(f"/assets/{asset_id}/comments")
        return list(response or [])

    async def aggregate(self, assets: list[Asset]) -> list[Comment]:
        """Fetch and thread every comment on assets with ``comment_count > 0``.

        Comment fetches are issued concurrently and joined before any
        threading happens. Every comment appears once in the result; replies
        are carried as ``{commentId, text}`` stubs and a reply's parent text
        is never resolved.

        Args:
            assets: Output of the asset tree walk for one project.

        Returns:
            Flattened comments with reply links resolved within this batch.
        """
        commented = [asset for asset in assets if asset.comment_count > 0]
        batches = await asyncio.gather(*(self.fetch_comments(a.asset_id) for a in commented))

        result: list[Comment] = []
        for asset, raw_batch in zip(commented, batches):
            batch = [self._build_comment(raw, asset, commented) for raw in raw_batch]
            if self._threading is ThreadingMode.PER_BATCH and result:
                thread_replies(result)
            result.extend(batch)
            if self._threading is ThreadingMode.PER_BATCH:
                thread_replies(batch)

        if self._threading is ThreadingMode.FINAL_PASS:
            thread_replies(result)

        logger.info(
            "[aggregate] complete; asset_count:%d;comment_count:%d;threading:%s",
            len(commented),
            len(result),
            self._threading.value,
        )
        return result

    @staticmethod
    def _build_comment(raw: dict[str, Any], asset: Asset, commented: list[Asset]) -> Comment:
        """Map a raw Frame.io comment dict to a Comment dataclass.

        The owning asset is looked up by the comment's own ``asset_id`` and
        falls back to the asset whose comments were being listed.
        """
        owner_id = raw.get(FIELD_ASSET_ID) or asset.asset_id
        owner = next((a for a in commented if a.asset_id == owner_id), asset)

        timestamp = raw.get(FIELD_TIMESTAMP)
        timecode_seconds = seconds_from_frames(timestamp, owner.fps)
        timecode = format_timecode(timecode_seconds) if timestamp is not None else None

        parent_id = raw.get(FIELD_PARENT_ID)
        replying_to = (
            CommentReference(comment_id=parent_id, text=UNRESOLVED_COMMENT_TEXT)
            if parent_id is not None
            else None
        )

        author = raw.get(FIELD_OWNER) or {}
        return Comment(
            comment_id=raw.get(FIELD_ID, ""),
            asset=owner.reference(),
            text=raw.get(FIELD_TEXT) or "",
            timecode_seconds=timecode_seconds,
            timecode=timecode,
            created_at=raw.get(FIELD_INSERTED_AT),
            updated_at=raw.get(FIELD_UPDATED_AT),
            left_by_email=author.get(FIELD_EMAIL),
            left_by=author.get(FIELD_NAME),
            replying_to=replying_to,
            completed=raw.get(FIELD_COMPLETED),
        )
