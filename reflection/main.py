"""Application factory: builds the store and services once and wires them together."""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime

from reflection.application.interfaces import BlobStore
from reflection.application.services import (
    ChangeNotifier,
    DragReorder,
    EntityStore,
    PlanEditor,
    SessionEngine,
    StatisticsAggregator,
)
from reflection.config import Settings, get_settings
from reflection.infrastructure.dependencies import build_blob_store, width_scale_from
from reflection.infrastructure.logging.log_config import setup_logging

logger = logging.getLogger(__name__)


@dataclass
class ReflectionApp:
    """Everything the presentation layer talks to."""

    settings: Settings
    blob_store: BlobStore
    notifier: ChangeNotifier
    store: EntityStore
    plan_editor: PlanEditor
    session_engine: SessionEngine
    statistics: StatisticsAggregator

    def new_drag(self, item_extent: float) -> DragReorder:
        return DragReorder(item_extent, commit_distance=self.settings.drag_commit_distance)

    async def aclose(self) -> None:
        await self.session_engine.shutdown()
        self.statistics.close()
        self.notifier.shutdown()
        await self.blob_store.close()


async def create_app(
    settings: Settings | None = None,
    blob_store: BlobStore | None = None,
    clock: Callable[[], datetime] | None = None,
) -> ReflectionApp:
    settings = settings or get_settings()
    blob_store = blob_store or await build_blob_store(settings)
    notifier = ChangeNotifier()

    store = await EntityStore.open(
        blob_store,
        notifier,
        clock=clock,
        default_plan_name=settings.default_plan_name,
        default_theme_color=settings.default_theme_color,
    )
    app = ReflectionApp(
        settings=settings,
        blob_store=blob_store,
        notifier=notifier,
        store=store,
        plan_editor=PlanEditor(store),
        session_engine=SessionEngine(store, notifier, tick_seconds=settings.session_tick_seconds),
        statistics=StatisticsAggregator(store, notifier, scale=width_scale_from(settings)),
    )
    logger.info("%s %s ready (%s storage)", settings.app_title, settings.app_version, settings.storage_backend)
    return app


@asynccontextmanager
async def lifespan(
    settings: Settings | None = None,
    blob_store: BlobStore | None = None,
    clock: Callable[[], datetime] | None = None,
) -> AsyncIterator[ReflectionApp]:
    """Application lifespan: configure logging, build the app, tear it down."""
    settings = settings or get_settings()
    setup_logging(settings)
    app = await create_app(settings, blob_store, clock)
    try:
        yield app
    finally:
        await app.aclose()
        logger.info("%s shut down", settings.app_title)
