"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from faceoff_arena.api.admin import router as admin_router
from faceoff_arena.api.models import CreateGroupRequest, OpenSessionRequest, VoteRequest
from faceoff_arena.app_logging import configure_logging
from faceoff_arena.containers import AppContainer
from faceoff_arena.domain.groups import Group
from faceoff_arena.domain.photos import Photo
from faceoff_arena.domain.sessions import SessionSnapshot
from faceoff_arena.services.battles import InvalidVoteError, VoteInProgressError
from faceoff_arena.services.errors import StorageError
from faceoff_arena.services.groups import InvalidGroupError
from faceoff_arena.services.sessions import BattleSession, SessionClosedError
from faceoff_arena.services.stats import Standing


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(StorageError)
    async def storage_error(request: Request, exc: StorageError) -> JSONResponse:
        """Report a storage outage without leaking its details."""
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/groups")
    async def list_groups(
        profile_id: UUID, request: Request, q: str | None = None
    ) -> dict[str, object]:
        """Return the profile's groups and discoverable public groups."""
        state_container: AppContainer = request.app.state.container
        directory = state_container.group_service.list_groups(profile_id, q)
        return {
            "my_groups": [_serialize_group(group) for group in directory.my_groups],
            "discover": [_serialize_group(group) for group in directory.discover],
        }

    @app.post("/groups", status_code=status.HTTP_201_CREATED)
    async def create_group(
        payload: CreateGroupRequest, request: Request
    ) -> dict[str, object]:
        """Create a group with the caller as admin."""
        state_container: AppContainer = request.app.state.container
        try:
            group = state_container.group_service.create_group(
                profile_id=payload.profile_id,
                name=payload.name,
                description=payload.description,
                is_public=payload.is_public,
            )
        except InvalidGroupError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        logger.info("Group created", extra={"group_id": str(group.id)})
        return _serialize_group(group)

    @app.get("/groups/{group_id}/leaderboard")
    async def leaderboard(
        group_id: UUID,
        request: Request,
        limit: int | None = Query(default=None, ge=1),
    ) -> dict[str, object]:
        """Return the group's photos ranked by wins."""
        state_container: AppContainer = request.app.state.container
        standings = state_container.stats_service.standings(
            group_id, limit or state_container.settings.leaderboard_limit
        )
        return {
            "group_id": str(group_id),
            "standings": [_serialize_standing(entry) for entry in standings],
        }

    @app.post("/groups/{group_id}/sessions", status_code=status.HTTP_201_CREATED)
    async def open_session(
        group_id: UUID, payload: OpenSessionRequest, request: Request
    ) -> dict[str, object]:
        """Open a battle session and load its first pair."""
        state_container: AppContainer = request.app.state.container
        session = await state_container.session_registry.open(
            group_id, payload.voter_id
        )
        return _serialize_snapshot(session.snapshot())

    @app.get("/sessions/{session_id}")
    async def get_session(session_id: UUID, request: Request) -> dict[str, object]:
        """Return the current state of a battle session."""
        session = _require_session(request, session_id)
        return _serialize_snapshot(session.snapshot())

    @app.post("/sessions/{session_id}/votes")
    async def vote(
        session_id: UUID, payload: VoteRequest, request: Request
    ) -> dict[str, object]:
        """Record the viewer's choice for the current pair."""
        session = _require_session(request, session_id)
        try:
            recorded = await session.vote(payload.winner_photo_id)
        except VoteInProgressError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        except InvalidVoteError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        except SessionClosedError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc
        response = _serialize_snapshot(session.snapshot())
        response["vote_id"] = str(recorded.id) if recorded else None
        return response

    @app.post("/sessions/{session_id}/refresh")
    async def refresh(session_id: UUID, request: Request) -> dict[str, object]:
        """Skip to the next battle."""
        session = _require_session(request, session_id)
        try:
            snapshot = await session.refresh()
        except VoteInProgressError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        except SessionClosedError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc
        return _serialize_snapshot(snapshot)

    @app.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def close_session(session_id: UUID, request: Request) -> None:
        """Tear down a battle session."""
        state_container: AppContainer = request.app.state.container
        if not state_container.session_registry.close(session_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)

    return app


def _require_session(request: Request, session_id: UUID) -> BattleSession:
    """Return a live session or raise 404."""
    state_container: AppContainer = request.app.state.container
    session = state_container.session_registry.get(session_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return session


def _serialize_snapshot(snapshot: SessionSnapshot) -> dict[str, object]:
    """Serialize a session snapshot for API responses."""
    notification = snapshot.notification
    return {
        "id": str(snapshot.id),
        "group_id": str(snapshot.group_id),
        "voter_id": str(snapshot.voter_id),
        "state": snapshot.state.value,
        "can_vote": snapshot.can_vote,
        "pair": (
            [
                _serialize_photo(snapshot.pair.first),
                _serialize_photo(snapshot.pair.second),
            ]
            if snapshot.pair
            else None
        ),
        "notification": (
            {
                "title": notification.title,
                "description": notification.description,
                "variant": notification.variant,
            }
            if notification
            else None
        ),
    }


def _serialize_photo(photo: Photo) -> dict[str, object]:
    return {
        "id": str(photo.id),
        "group_id": str(photo.group_id),
        "owner_id": str(photo.owner_id),
        "title": photo.title or "Untitled",
        "image_url": photo.image_url,
        "owner_display_name": photo.owner_display_name or "Anonymous",
        "votes_count": photo.votes_count,
        "wins_count": photo.wins_count,
    }


def _serialize_group(group: Group) -> dict[str, object]:
    return {
        "id": str(group.id),
        "name": group.name,
        "description": group.description,
        "is_public": group.is_public,
        "invite_code": (
            group.invite_code if group.is_member and not group.is_public else None
        ),
        "created_at": group.created_at.isoformat() if group.created_at else None,
        "member_count": group.member_count,
        "is_member": group.is_member,
        "is_admin": group.is_admin,
    }


def _serialize_standing(standing: Standing) -> dict[str, object]:
    return {
        "rank": standing.rank,
        "win_rate": round(standing.win_rate, 4),
        "photo": _serialize_photo(standing.photo),
    }
