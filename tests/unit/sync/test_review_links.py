"""Unit tests for sync/review_links.py — review link listing and updates."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from frameio_sync.frameio.models import AssetReference
from frameio_sync.sync.review_links import ReviewLinkSync, build_review_link_update

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _raw_review_link(**overrides: Any) -> dict[str, Any]:
    raw: dict[str, Any] = {
        "id": "rl-1",
        "project_id": "p1",
        "name": "Client cut v3",
        "short_url": "https://f.io/abc123",
        "inserted_at": "2024-02-01T09:00:00Z",
        "view_count": 12,
        "assets": [{"id": "a1"}, {"id": "a2"}],
        "enable_downloading": True,
        "is_active": True,
        "current_version_only": True,
    }
    raw.update(overrides)
    return raw


def _make_sync() -> tuple[ReviewLinkSync, MagicMock]:
    mock_client = MagicMock()
    mock_client.get = AsyncMock()
    mock_client.put = AsyncMock()
    return ReviewLinkSync(mock_client), mock_client


# ---------------------------------------------------------------------------
# build_review_link_update tests
# ---------------------------------------------------------------------------


class TestBuildReviewLinkUpdate:
    def test_only_is_active_supplied(self) -> None:
        assert build_review_link_update(is_active=False) == {"is_active": False}

    def test_view_all_versions_inverts_to_current_version_only(self) -> None:
        assert build_review_link_update(view_all_versions=True) == {
            "current_version_only": False
        }

    def test_all_fields_supplied(self) -> None:
        body = build_review_link_update(
            name="Final", allow_downloading=False, is_active=True, view_all_versions=False
        )
        assert body == {
            "name": "Final",
            "enable_downloading": False,
            "is_active": True,
            "current_version_only": True,
        }

    def test_nothing_supplied(self) -> None:
        assert build_review_link_update() == {}


# ---------------------------------------------------------------------------
# list_review_links tests
# ---------------------------------------------------------------------------


class TestListReviewLinks:
    @pytest.mark.asyncio
    async def test_projects_remote_fields(self) -> None:
        sync, mock_client = _make_sync()
        mock_client.get.return_value = [_raw_review_link()]

        [link] = await sync.list_review_links("p1")

        mock_client.get.assert_awaited_once_with("/projects/p1/review_links")
        assert link.review_link_id == "rl-1"
        assert link.project_id == "p1"
        assert link.short_url == "https://f.io/abc123"
        assert link.view_count == 12
        assert link.allow_downloading is True
        assert link.view_all_versions is False

    @pytest.mark.asyncio
    async def test_asset_names_are_unresolved_stubs(self) -> None:
        sync, mock_client = _make_sync()
        mock_client.get.return_value = [_raw_review_link()]

        [link] = await sync.list_review_links("p1")

        assert link.assets == [
            AssetReference(asset_id="a1", name="Not synced"),
            AssetReference(asset_id="a2", name="Not synced"),
        ]

    @pytest.mark.asyncio
    async def test_missing_version_flag_leaves_view_all_versions_unset(self) -> None:
        sync, mock_client = _make_sync()
        mock_client.get.return_value = [_raw_review_link(current_version_only=None)]

        [link] = await sync.list_review_links("p1")

        assert link.view_all_versions is None


# ---------------------------------------------------------------------------
# update tests
# ---------------------------------------------------------------------------


class TestUpdateReviewLink:
    @pytest.mark.asyncio
    async def test_sends_only_supplied_fields(self) -> None:
        sync, mock_client = _make_sync()
        mock_client.put.return_value = _raw_review_link(is_active=False)

        await sync.update_review_link("rl-1", is_active=False)

        mock_client.put.assert_awaited_once_with("/review_links/rl-1", {"is_active": False})

    @pytest.mark.asyncio
    async def test_returns_reprojected_link(self) -> None:
        sync, mock_client = _make_sync()
        mock_client.put.return_value = _raw_review_link(
            name="Renamed", current_version_only=False
        )

        link = await sync.update_review_link("rl-1", name="Renamed", view_all_versions=True)

        assert link.name == "Renamed"
        assert link.view_all_versions is True
        mock_client.put.assert_awaited_once_with(
            "/review_links/rl-1", {"name": "Renamed", "current_version_only": False}
        )

    @pytest.mark.asyncio
    async def test_no_fields_raises_without_calling_api(self) -> None:
        sync, mock_client = _make_sync()

        with pytest.raises(ValueError, match="rl-1"):
            await sync.update_review_link("rl-1")

        mock_client.put.assert_not_awaited()


class TestUpdateProject:
    @pytest.mark.asyncio
    async def test_puts_new_name(self) -> None:
        sync, mock_client = _make_sync()
        mock_client.put.return_value = {"id": "p1", "name": "Renamed", "root_asset_id": "r"}

        project = await sync.update_project("p1", "Renamed")

        mock_client.put.assert_awaited_once_with("/projects/p1", {"name": "Renamed"})
        assert project.name == "Renamed"
        assert project.root_asset_id == "r"

    @pytest.mark.asyncio
    async def test_missing_name_raises(self) -> None:
        sync, mock_client = _make_sync()

        with pytest.raises(ValueError):
            await sync.update_project("p1", None)

        mock_client.put.assert_not_awaited()
