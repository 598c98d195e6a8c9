# clinic_booking/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from clinic_booking.config import CLINIC_TIMEZONE, LOG_LEVEL
from clinic_booking.core.errors import InvalidRequest
from clinic_booking.db import init_db
from clinic_booking.routers import appointments_routes, clinic_routes, slots_routes

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("clinic booking started (clinic timezone %s)", CLINIC_TIMEZONE)
    yield


app = FastAPI(title="Clinic Booking API", lifespan=lifespan)

app.include_router(clinic_routes.router)
app.include_router(slots_routes.router)
app.include_router(appointments_routes.router)


@app.exception_handler(RequestValidationError)
async def invalid_request_handler(request: Request, exc: RequestValidationError):
    # missing or malformed fields never reach the scheduling logic
    error = InvalidRequest("Missing or invalid fields")
    detail = error.to_detail()
    detail["errors"] = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()
    ]
    return JSONResponse(status_code=error.status_code, content={"detail": detail})


@app.get("/health")
def health_check():
    return {"status": "ok"}
