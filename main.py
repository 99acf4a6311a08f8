import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
from database import check_connection
from exceptions import RentalError
from logging_config import setup_logging
from routers import ALL_ROUTERS

setup_logging(level=config.LOG_LEVEL, format_type=config.LOG_FORMAT)
logger = logging.getLogger(__name__)


def _error_body(error: str, message=None) -> dict:
    body = {"error": error}
    if message:
        body["message"] = message
    return body


# App instance
app = FastAPI(title="RentLedger API")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RentalError)
async def rental_error_handler(request: Request, exc: RentalError):
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{field}: {err.get('msg')}" if field else err.get("msg", ""))
    return JSONResponse(status_code=400, content=_error_body("Invalid request", "; ".join(problems)))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"error": "Route not found"})
    return JSONResponse(status_code=exc.status_code, content=_error_body(str(exc.detail)))


for router in ALL_ROUTERS:
    app.include_router(router)


@app.get("/api/health", tags=["health"])
def health():
    database_ok = check_connection()
    return JSONResponse(
        status_code=200 if database_ok else 503,
        content={"status": "ok" if database_ok else "degraded", "database": database_ok},
    )


# Catch-all for anything the handlers above did not map
@app.middleware("http")
async def internal_error_middleware(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=config.PORT, reload=True)
