"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from faceoff_arena.adapters.supabase_group_repository import SupabaseGroupRepository
from faceoff_arena.adapters.supabase_photo_repository import SupabasePhotoRepository
from faceoff_arena.adapters.supabase_vote_repository import SupabaseVoteRepository
from faceoff_arena.config import Settings
from faceoff_arena.services.admin import AdminService
from faceoff_arena.services.battles import BattleService
from faceoff_arena.services.groups import GroupService
from faceoff_arena.services.sessions import BattleSessionRegistry
from faceoff_arena.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    battle_service: BattleService
    session_registry: BattleSessionRegistry
    group_service: GroupService
    stats_service: StatsService
    admin_service: AdminService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    photo_repository = SupabasePhotoRepository(supabase_client)
    vote_repository = SupabaseVoteRepository(supabase_client)
    group_repository = SupabaseGroupRepository(supabase_client)
    battle_service = BattleService(
        photo_repository=photo_repository,
        vote_repository=vote_repository,
        pool_limit=resolved_settings.candidate_pool_limit,
    )
    session_registry = BattleSessionRegistry(
        battle_service=battle_service,
        next_battle_delay_seconds=resolved_settings.next_battle_delay_seconds,
        show_debug=resolved_settings.show_debug_errors,
        idle_timeout_seconds=resolved_settings.session_idle_timeout_seconds,
    )
    group_service = GroupService(group_repository)
    stats_service = StatsService(photo_repository)
    admin_service = AdminService(
        photo_repository=photo_repository,
        vote_repository=vote_repository,
    )

    async def close_resources() -> None:
        session_registry.close_all()

    return AppContainer(
        settings=resolved_settings,
        battle_service=battle_service,
        session_registry=session_registry,
        group_service=group_service,
        stats_service=stats_service,
        admin_service=admin_service,
        close_resources=close_resources,
    )
