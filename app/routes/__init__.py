from apscheduler.schedulers.base import BaseScheduler
from dishka import FromDishka
from fastapi import APIRouter
from dishka.integrations.fastapi import DishkaRoute

from app.schemas.health import HealthSchema, JobSchema
from app.routes.budgets import router as budgets_router
from app.routes.summary import router as summary_router
from app.routes.transactions import router as transactions_router
from app.settings.app import AppSettings


router = APIRouter(route_class=DishkaRoute)
router.include_router(transactions_router)
router.include_router(summary_router)
router.include_router(budgets_router)


@router.get("/health")
async def health(
    scheduler: FromDishka[BaseScheduler], settings: FromDishka[AppSettings]
) -> HealthSchema:
    jobs = [
        JobSchema(
            id=job.id,
            next_run_time=getattr(job, "next_run_time", None),
            name=job.name,
        )
        for job in scheduler.get_jobs()
    ]
    return HealthSchema(
        status="ok",
        app_name=settings.name,
        jobs=jobs,
    )
