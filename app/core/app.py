import asyncio
import operator
from typing import Any, Awaitable, Callable
import logging

from dishka import AsyncContainer, Scope
from fastapi import FastAPI
from dishka.integrations.fastapi import setup_dishka
import contextlib

from app.deps import create_container
from app.routes import router as api_router
from app.services.budgets import BudgetAlertInteractor
from app.services.exception_handler import register_exception_handlers
from app.settings.app import AppSettings
from apscheduler.schedulers.base import BaseScheduler


logger = logging.getLogger(__name__)

BUDGET_MONITOR_JOB_ID = "budget-overspend-monitor"


async def service_runner[T](
    container: AsyncContainer,
    target: type[T],
    action: Callable[[T], Awaitable[Any]],
) -> None:
    async with container(scope=Scope.REQUEST) as request_container:
        service = await request_container.get(target)
        try:
            await action(service)
        except Exception:
            logger.exception("Background service error (%s)", target.__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    container: AsyncContainer = app.state.dishka_container
    settings = await container.get(AppSettings)
    scheduler = await container.get(BaseScheduler)
    scheduler.start()
    if settings.budget_check_minutes > 0:
        scheduler.add_job(
            service_runner,
            args=(
                container,
                BudgetAlertInteractor,
                operator.methodcaller("__call__"),
            ),
            trigger="interval",
            id=BUDGET_MONITOR_JOB_ID,
            minutes=settings.budget_check_minutes,
        )
        logger.info(
            "Budget overspend monitor scheduled every %d minutes",
            settings.budget_check_minutes,
        )
    yield
    scheduler.shutdown(wait=False)
    await container.close()


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    if container is None:
        container = create_container()
    settings = asyncio.run(container.get(AppSettings))
    app = FastAPI(lifespan=lifespan, title=settings.name)
    register_exception_handlers(app)
    setup_dishka(container, app=app)
    app.include_router(api_router)
    return app
