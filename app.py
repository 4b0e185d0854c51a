import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import CLIENT_URL
from database import init_db
from routes.availability_route import availability_router
from routes.booking_route import booking_router
from routes.host_route import host_router
from routes.websocket import websocket_router
from scheduling.errors import SchedulingError

logger = logging.getLogger(__name__)

app = FastAPI(title="Slot Booking API")

init_db()

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[CLIENT_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(host_router)
app.include_router(availability_router)
app.include_router(booking_router)
app.include_router(websocket_router)

@app.exception_handler(SchedulingError)
async def scheduling_error_handler(request: Request, exc: SchedulingError):
    """
    Maps engine errors to their HTTP status: validation 400, not found 404, conflict 409.
    """
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "code": exc.code, "message": exc.message},
    )

@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "code": "VALIDATION_ERROR",
            "message": "Invalid request",
            "errors": jsonable_encoder(exc.errors()),
        },
    )

@app.get("/")
async def base_path():
    """
    Root endpoint to verify that the API is running.

    Returns:
        dict: A success message.
    """
    return {"success": True}
