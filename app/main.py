import logging

uvicorn_logger = logging.getLogger("uvicorn")

app_logger = logging.getLogger("app")
app_logger.setLevel(logging.DEBUG)
app_logger.handlers = uvicorn_logger.handlers
app_logger.propagate = False

for logger_name in ["app.services.order_import", "app.services.order_items", "app.services.config"]:
    module_logger = logging.getLogger(logger_name)
    module_logger.setLevel(logging.DEBUG)
    module_logger.handlers = uvicorn_logger.handlers
    module_logger.propagate = False

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.api.v1.orders import router as orders_router
from app.api.v1.config import router as config_router

logger = logging.getLogger(__name__)
logger.info("Application startup - logging configured")


app = FastAPI(
    title="Channable Order Import",
    description="Imports Channable marketplace orders into quotes",
    version="1.0.0",
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

app.include_router(orders_router)
app.include_router(config_router)


@app.get("/health")
async def health_check():
    return {"status": "ok"}


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_encoder(exc.errors())},
    )
