"""Data models for Frame.io entities and the rows synced to the host."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Frame.io JSON field names
FIELD_ID = "id"
FIELD_NAME = "name"
FIELD_EMAIL = "email"
FIELD_TYPE = "_type"
FIELD_TEAM_ID = "team_id"
FIELD_PROJECT_ID = "project_id"
FIELD_PROJECT = "project"
FIELD_PARENT_ID = "parent_id"
FIELD_ROOT_ASSET_ID = "root_asset_id"
FIELD_ASSET_ID = "asset_id"
FIELD_INSERTED_AT = "inserted_at"
FIELD_UPDATED_AT = "updated_at"
FIELD_THUMB = "thumb"
FIELD_COMMENT_COUNT = "comment_count"
FIELD_ITEM_COUNT = "item_count"
FIELD_FPS = "fps"
FIELD_FILE_COUNT = "file_count"
FIELD_FOLDER_COUNT = "folder_count"
FIELD_STORAGE = "storage"
FIELD_STORAGE_LIMIT = "storage_limit"
FIELD_LINK = "link"
FIELD_SLACK_WEBHOOK = "slack_webhook"
FIELD_IMAGE = "image_256"
FIELD_PROJECT_COUNT = "project_count"
FIELD_SHORT_URL = "short_url"
FIELD_VIEW_COUNT = "view_count"
FIELD_ASSETS = "assets"
FIELD_ENABLE_DOWNLOADING = "enable_downloading"
FIELD_IS_ACTIVE = "is_active"
FIELD_CURRENT_VERSION_ONLY = "current_version_only"
FIELD_TEXT = "text"
FIELD_TIMESTAMP = "timestamp"
FIELD_OWNER = "owner"
FIELD_COMPLETED = "completed"

# Asset type literals
ASSET_TYPE_VERSION_STACK = "version_stack"
ASSET_TYPE_VERSION_STACK_LABEL = "version stack"

# Placeholder names for references the connector does not resolve
PROJECT_ROOT_NAME = "Project Root"
UNRESOLVED_ASSET_NAME = "Not synced"
UNRESOLVED_COMMENT_TEXT = "Comment text not found"

APP_BASE_URL = "https://app.frame.io"


@dataclass
class Team:
    """A Frame.io team visible to the connected account."""

    team_id: str
    name: str
    storage_used_bytes: int | None = None
    storage_limit_bytes: int | None = None
    link: str | None = None
    slack_webhook_url: str | None = None
    logo_url: str | None = None
    project_count: int | None = None

    def to_row(self) -> dict[str, Any]:
        return {
            "teamId": self.team_id,
            "name": self.name,
            "storageUsedBytes": self.storage_used_bytes,
            "storageLimitBytes": self.storage_limit_bytes,
            "link": self.link,
            "slackWebhookUrl": self.slack_webhook_url,
            "logoUrl": self.logo_url,
            "projectCount": self.project_count,
        }


@dataclass
class Project:
    """A Frame.io project; ``root_asset_id`` anchors its asset tree."""

    project_id: str
    team_id: str | None
    name: str
    root_asset_id: str | None
    created_at: str | None = None
    updated_at: str | None = None
    file_count: int | None = None
    folder_count: int | None = None
    storage_bytes: int | None = None

    @property
    def url(self) -> str:
        return f"{APP_BASE_URL}/projects/{self.project_id}"

    def to_row(self) -> dict[str, Any]:
        return {
            "projectId": self.project_id,
            "teamId": self.team_id,
            "name": self.name,
            "rootAssetId": self.root_asset_id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "url": self.url,
            "fileCount": self.file_count,
            "folderCount": self.folder_count,
            "storageBytes": self.storage_bytes,
        }


@dataclass(frozen=True)
class AssetReference:
    """An ``{assetId, name}`` stub pointing at an asset row."""

    asset_id: str
    name: str

    def to_row(self) -> dict[str, Any]:
        return {"assetId": self.asset_id, "name": self.name}


@dataclass
class Asset:
    """A file, folder or version stack in a project's asset tree."""

    asset_id: str
    name: str
    type: str
    parent: AssetReference
    is_in_project_root: bool
    comment_count: int = 0
    item_count: int = 0
    thumbnail_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    fps: float | None = None
    project_id: str | None = None

    @property
    def is_container(self) -> bool:
        return self.item_count > 0

    @property
    def url(self) -> str:
        return f"{APP_BASE_URL}/player/{self.asset_id}"

    def reference(self) -> AssetReference:
        return AssetReference(asset_id=self.asset_id, name=self.name)

    def to_row(self) -> dict[str, Any]:
        return {
            "assetId": self.asset_id,
            "name": self.name,
            "type": self.type,
            "thumbnailUrl": self.thumbnail_url,
            "parent": self.parent.to_row(),
            "commentCount": self.comment_count,
            "itemCount": self.item_count,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "isInProjectRoot": self.is_in_project_root,
            "fps": self.fps,
            "projectId": self.project_id,
            "url": self.url,
        }


@dataclass
class ReviewLink:
    """A shareable review link and its mutable settings."""

    review_link_id: str
    project_id: str | None
    name: str
    short_url: str | None = None
    created_at: str | None = None
    view_count: int | None = None
    assets: list[AssetReference] = field(default_factory=list)
    allow_downloading: bool | None = None
    is_active: bool | None = None
    view_all_versions: bool | None = None

    def to_row(self) -> dict[str, Any]:
        return {
            "reviewLinkId": self.review_link_id,
            "projectId": self.project_id,
            "name": self.name,
            "url": self.short_url,
            "createdAt": self.created_at,
            "viewCount": self.view_count,
            "assets": [a.to_row() for a in self.assets],
            "allowDownloading": self.allow_downloading,
            "isActive": self.is_active,
            "viewAllVersions": self.view_all_versions,
        }


@dataclass(frozen=True)
class CommentReference:
    """A ``{commentId, text}`` stub; replies never nest full comments."""

    comment_id: str
    text: str

    def to_row(self) -> dict[str, Any]:
        return {"commentId": self.comment_id, "text": self.text}


@dataclass
class Comment:
    """A comment left on an asset, with reply threading resolved in-batch."""

    comment_id: str
    asset: AssetReference
    text: str
    timecode_seconds: float | None = None
    timecode: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    left_by_email: str | None = None
    left_by: str | None = None
    replying_to: CommentReference | None = None
    replies: list[CommentReference] = field(default_factory=list)
    completed: bool | None = None

    @property
    def asset_id(self) -> str:
        return self.asset.asset_id

    @property
    def is_a_reply(self) -> bool:
        return self.replying_to is not None

    @property
    def has_replies(self) -> bool:
        return bool(self.replies)

    def reference(self) -> CommentReference:
        return CommentReference(comment_id=self.comment_id, text=self.text)

    def to_row(self) -> dict[str, Any]:
        return {
            "commentId": self.comment_id,
            "assetId": self.asset_id,
            "asset": self.asset.to_row(),
            "text": self.text,
            "timecodeSeconds": self.timecode_seconds,
            "timecode": self.timecode,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "leftByEmail": self.left_by_email,
            "leftBy": self.left_by,
            "hasReplies": self.has_replies,
            "isAReply": self.is_a_reply,
            "replyingTo": self.replying_to.to_row() if self.replying_to else None,
            "replies": [r.to_row() for r in self.replies],
            "completed": self.completed,
        }


@dataclass(frozen=True)
class Continuation:
    """Paging state the host replays on the next sync invocation."""

    page: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {"page": self.page}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Continuation:
        """Rebuild a continuation; a missing or empty payload means page 1."""
        if not data:
            return cls()
        page = int(data.get("page", 1))
        if page < 1:
            raise ValueError(f"Continuation page must be >= 1, got {page}")
        return cls(page=page)


@dataclass
class SyncResult:
    """One sync invocation's rows plus the continuation, if paging remains."""

    result: list[dict[str, Any]]
    continuation: Continuation | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"result": self.result}
        if self.continuation is not None:
            body["continuation"] = self.continuation.to_dict()
        return body


def parse_team(raw: dict[str, Any]) -> Team:
    """Map a raw Frame.io team dict to a Team dataclass."""
    return Team(
        team_id=raw.get(FIELD_ID, ""),
        name=raw.get(FIELD_NAME, ""),
        storage_used_bytes=raw.get(FIELD_STORAGE),
        storage_limit_bytes=raw.get(FIELD_STORAGE_LIMIT),
        link=raw.get(FIELD_LINK),
        slack_webhook_url=raw.get(FIELD_SLACK_WEBHOOK),
        logo_url=raw.get(FIELD_IMAGE),
        project_count=raw.get(FIELD_PROJECT_COUNT),
    )


def parse_project(raw: dict[str, Any]) -> Project:
    """Map a raw Frame.io project dict to a Project dataclass."""
    return Project(
        project_id=raw.get(FIELD_ID, ""),
        team_id=raw.get(FIELD_TEAM_ID),
        name=raw.get(FIELD_NAME, ""),
        root_asset_id=raw.get(FIELD_ROOT_ASSET_ID),
        created_at=raw.get(FIELD_INSERTED_AT),
        updated_at=raw.get(FIELD_UPDATED_AT),
        file_count=raw.get(FIELD_FILE_COUNT),
        folder_count=raw.get(FIELD_FOLDER_COUNT),
        storage_bytes=raw.get(FIELD_STORAGE),
    )


def parse_review_link(raw: dict[str, Any]) -> ReviewLink:
    """Map a raw Frame.io review link dict to a ReviewLink dataclass.

    Asset names are left as placeholders; consumers join on ``assetId``
    against the asset rows if they need them.
    """
    current_version_only = raw.get(FIELD_CURRENT_VERSION_ONLY)
    return ReviewLink(
        review_link_id=raw.get(FIELD_ID, ""),
        project_id=raw.get(FIELD_PROJECT_ID),
        name=raw.get(FIELD_NAME, ""),
        short_url=raw.get(FIELD_SHORT_URL),
        created_at=raw.get(FIELD_INSERTED_AT),
        view_count=raw.get(FIELD_VIEW_COUNT),
        assets=[
            AssetReference(asset_id=a.get(FIELD_ID, ""), name=UNRESOLVED_ASSET_NAME)
            for a in raw.get(FIELD_ASSETS) or []
        ],
        allow_downloading=raw.get(FIELD_ENABLE_DOWNLOADING),
        is_active=raw.get(FIELD_IS_ACTIVE),
        view_all_versions=(
            None if current_version_only is None else not current_version_only
        ),
    )
