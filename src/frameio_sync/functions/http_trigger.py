"""HTTP trigger blueprint — health, sync, update and action endpoints."""

from __future__ import annotations

import json
import logging
from typing import Any

import azure.functions as func

from frameio_sync import __version__
from frameio_sync.config import load_config
from frameio_sync.frameio.client import FrameioApiError, FrameioTransportError
from frameio_sync.frameio.models import Continuation, SyncResult
from frameio_sync.orchestration.connector import FrameioConnector, connector_from_config

logger = logging.getLogger(__name__)

bp = func.Blueprint()

BEARER_PREFIX = "bearer "


class BadRequestError(Exception):
    """Raised when a request body or route names something unsupported."""


def _json_response(body: dict[str, Any], status_code: int = 200) -> func.HttpResponse:
    return func.HttpResponse(json.dumps(body), status_code=status_code, mimetype="application/json")


def _bearer_token(req: func.HttpRequest) -> str | None:
    """Return the bearer token the host forwarded, if any."""
    header = req.headers.get("Authorization") or ""
    if header.lower().startswith(BEARER_PREFIX):
        return header[len(BEARER_PREFIX) :].strip() or None
    return None


def _request_body(req: func.HttpRequest) -> dict[str, Any]:
    if not req.get_body():
        return {}
    try:
        body = req.get_json()
    except ValueError as exc:
        raise BadRequestError("Request body is not valid JSON") from exc
    if not isinstance(body, dict):
        raise BadRequestError("Request body must be a JSON object")
    return body


def _required(parameters: dict[str, Any], name: str) -> Any:
    value = parameters.get(name)
    if value in (None, ""):
        raise BadRequestError(f"Missing required parameter '{name}'")
    return value


async def _run_sync(
    connector: FrameioConnector, table: str, body: dict[str, Any]
) -> SyncResult:
    parameters = body.get("parameters") or {}
    if table == "teams":
        return await connector.sync_teams()
    if table == "projects":
        continuation = Continuation.from_dict(body.get("continuation"))
        return await connector.sync_projects(parameters.get("teamId"), continuation)
    if table == "assets":
        return await connector.sync_assets(_required(parameters, "projectId"))
    if table == "comments":
        return await connector.sync_comments(_required(parameters, "projectId"))
    if table == "review_links":
        return await connector.sync_review_links(_required(parameters, "projectId"))
    raise BadRequestError(f"Unknown sync table '{table}'")


async def _run_update(
    connector: FrameioConnector, table: str, body: dict[str, Any]
) -> dict[str, Any]:
    updates = body.get("updates") or []
    if table == "projects":
        return await connector.execute_project_update(updates)
    if table == "review_links":
        return await connector.execute_review_link_update(updates)
    raise BadRequestError(f"Unknown update table '{table}'")


async def _run_action(
    connector: FrameioConnector, name: str, body: dict[str, Any]
) -> dict[str, Any]:
    parameters = body.get("parameters") or {}
    if name == "update_project":
        return await connector.update_project(
            _required(parameters, "projectId"), parameters.get("name")
        )
    if name == "update_review_link":
        return await connector.update_review_link(
            _required(parameters, "reviewLinkId"),
            name=parameters.get("name"),
            allow_downloading=parameters.get("allowDownloading"),
            is_active=parameters.get("isActive"),
            view_all_versions=parameters.get("viewAllVersions"),
        )
    raise BadRequestError(f"Unknown action '{name}'")


def _error_response(scope: str, exc: Exception) -> func.HttpResponse:
    """Map an exception to the HTTP response the host surfaces to the user."""
    if isinstance(exc, (BadRequestError, ValueError)):
        logger.warning("[%s] bad request; error:%s", scope, exc)
        return _json_response({"status": "error", "message": str(exc)}, status_code=400)
    if isinstance(exc, FrameioApiError):
        logger.error("[%s] Frame.io request failed", scope, exc_info=True)
        body = {
            "status": "error",
            "message": exc.message,
            "upstream_status": exc.status_code,
            "request": f"{exc.method} {exc.path}",
        }
        return _json_response(body, status_code=502)
    if isinstance(exc, FrameioTransportError):
        logger.error("[%s] Frame.io unreachable", scope, exc_info=True)
        body = {"status": "error", "message": exc.reason, "request": f"{exc.method} {exc.path}"}
        return _json_response(body, status_code=502)
    logger.error("[%s] request failed", scope, exc_info=True)
    return _json_response({"status": "error", "message": "Internal server error"}, status_code=500)


@bp.route(route="health", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint returning service status and version."""
    logger.info("[health_check] health check requested")
    return _json_response({"status": "ok", "version": __version__})


@bp.route(route="connection", methods=["GET"], auth_level=func.AuthLevel.FUNCTION)
async def connection_name(req: func.HttpRequest) -> func.HttpResponse:
    """Resolve the display name of the connected Frame.io account."""
    logger.info("[connection_name] connection name requested")
    try:
        config = load_config()
        async with connector_from_config(config, _bearer_token(req)) as connector:
            name = await connector.get_connection_name()
        return _json_response({"name": name})
    except Exception as exc:
        return _error_response("connection_name", exc)


@bp.route(route="sync/{table}", methods=["POST"], auth_level=func.AuthLevel.FUNCTION)
async def sync_table(req: func.HttpRequest) -> func.HttpResponse:
    """Run one sync invocation for a table and return ``{result, continuation?}``."""
    table = req.route_params.get("table", "")
    logger.info("[sync_table] sync requested; table:%s", table)
    try:
        body = _request_body(req)
        config = load_config()
        async with connector_from_config(config, _bearer_token(req)) as connector:
            sync_result = await _run_sync(connector, table, body)
        logger.info(
            "[sync_table] sync complete; table:%s;row_count:%d;has_continuation:%s",
            table,
            len(sync_result.result),
            sync_result.continuation is not None,
        )
        return _json_response(sync_result.to_dict())
    except Exception as exc:
        return _error_response("sync_table", exc)


@bp.route(route="update/{table}", methods=["POST"], auth_level=func.AuthLevel.FUNCTION)
async def update_table(req: func.HttpRequest) -> func.HttpResponse:
    """Push an edited row back to Frame.io; only the first update pair is applied."""
    table = req.route_params.get("table", "")
    logger.info("[update_table] update requested; table:%s", table)
    try:
        body = _request_body(req)
        config = load_config()
        async with connector_from_config(config, _bearer_token(req)) as connector:
            result = await _run_update(connector, table, body)
        return _json_response(result)
    except Exception as exc:
        return _error_response("update_table", exc)


@bp.route(route="action/{name}", methods=["POST"], auth_level=func.AuthLevel.FUNCTION)
async def run_action(req: func.HttpRequest) -> func.HttpResponse:
    """Run a standalone update action and return the updated row."""
    name = req.route_params.get("name", "")
    logger.info("[run_action] action requested; action:%s", name)
    try:
        body = _request_body(req)
        config = load_config()
        async with connector_from_config(config, _bearer_token(req)) as connector:
            row = await _run_action(connector, name, body)
        return _json_response(row)
    except Exception as exc:
        return _error_response("run_action", exc)
