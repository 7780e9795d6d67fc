"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

if TYPE_CHECKING:
    from faceoff_arena.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/votes", dependencies=[Depends(require_admin)])
async def list_votes(
    request: Request, limit: int = Query(default=50, ge=1)
) -> dict[str, object]:
    """Return the most recent votes."""
    container: AppContainer = request.app.state.container
    return {"votes": container.admin_service.list_votes(limit)}


@router.get("/groups/{group_id}/tally-audit", dependencies=[Depends(require_admin)])
async def tally_audit(group_id: UUID, request: Request) -> dict[str, object]:
    """Check stored photo counters against the group's vote log."""
    container: AppContainer = request.app.state.container
    return container.admin_service.tally_audit(group_id)


@router.get("/sessions", dependencies=[Depends(require_admin)])
async def list_sessions(request: Request) -> dict[str, object]:
    """Return live battle sessions."""
    container: AppContainer = request.app.state.container
    return {
        "sessions": [
            {
                "id": str(session.id),
                "group_id": str(session.group_id),
                "voter_id": str(session.voter_id),
                "state": session.state.value,
            }
            for session in container.session_registry.list_sessions()
        ]
    }
