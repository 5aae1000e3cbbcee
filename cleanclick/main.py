from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from cleanclick.api.main import api_router
from cleanclick.core.config import settings
from cleanclick.core.logging import logger
from cleanclick.errors import CleanClickError

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
)

if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(CleanClickError)
async def cleanclick_error_handler(request: Request, exc: CleanClickError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error({
            "event_type": "request",
            "event_name": "request_failed",
            "path": request.url.path,
            "error": exc.message,
        })
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed requests are plain bad input for this API.
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


app.include_router(api_router, prefix=settings.API_V1_STR)
