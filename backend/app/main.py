from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.errors import AppError, ValidationError
from app.core.logging import configure_logging, get_logger
from app.db import registry  # noqa: F401
from app.routers.dashboard import router as dashboard_router
from app.routers.notifications import router as notifications_router
from app.routers.onboarding import router as onboarding_router
from app.routers.subtasks import router as subtasks_router
from app.routers.tasks import router as tasks_router
from app.routers.teams import router as teams_router
from app.routers.updates import router as updates_router
from app.routers.users import router as users_router

configure_logging()
logger = get_logger(__name__)

app = FastAPI(title="Taskboard Backend")

app.include_router(users_router)
app.include_router(onboarding_router)
app.include_router(teams_router)
app.include_router(tasks_router)
app.include_router(subtasks_router)
app.include_router(updates_router)
app.include_router(dashboard_router)
app.include_router(notifications_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, ValidationError):
        content = {"detail": exc.errors}
    else:
        content = {"detail": exc.message}

    logger.info(
        "request.rejected path=%s status=%s error=%s",
        request.url.path,
        exc.status_code,
        type(exc).__name__,
    )
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request.failed path=%s", request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


@app.get("/health")
async def health():
    return {"status": "ok"}
