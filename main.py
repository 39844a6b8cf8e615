from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse

import models  # noqa: F401  registers tables on Base.metadata
from database import Base, engine
from services.errors import ServiceError

from routes import (
    trips,
    vault,
    itinerary,
    files,
    activity_types,
)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Trip Vault API (Trips, Vault, Itinerary, Screenshots)")

# setup file logger for API failures
from utils.logger import setup_api_logger
api_logger = setup_api_logger()


async def _request_body(request) -> str:
    try:
        body = await request.body()
    except Exception:
        body = b""
    return body.decode('utf-8', errors='replace')


@app.exception_handler(Exception)
async def generic_exception_handler(request, exc):
    # log request info and stacktrace
    api_logger.error("Unhandled exception on %s %s | error=%s",
                     request.method, request.url.path, str(exc), exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


@app.exception_handler(ServiceError)
async def service_exception_handler(request, exc: ServiceError):
    # 4xx are the caller's problem, 5xx were already logged with a traceback by the service
    log = api_logger.warning if exc.status_code < 500 else api_logger.error
    log("%s on %s %s | status=%s | detail=%s",
        type(exc).__name__, request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    body = await _request_body(request)
    api_logger.warning("HTTPException on %s %s | status=%s | body=%s | detail=%s",
                       request.method, request.url.path, exc.status_code,
                       body, str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


app.include_router(trips.router)
app.include_router(vault.router)
app.include_router(itinerary.router)
app.include_router(files.router)
app.include_router(activity_types.router)
