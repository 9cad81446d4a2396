# app/main.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Any, Optional
from app.routers import auth, conversations, messages, pictograms, ws
from app.db.mongo import client, db, ensure_indexes, verify_mongodb_connection
from app.core.config import settings
from app.core.logger import logger
from app.utils.responses import format_error_response


app = FastAPI(
    title="Lexipic Backend",
    version="0.1.0",
    description="Pictogram generation and messaging backend",
)

# ✅ CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ✅ Startup/shutdown
@app.on_event("startup")
async def startup():
    await verify_mongodb_connection()
    try:
        await ensure_indexes(db)
    except PyMongoError as e:
        logger.error(f"Could not create MongoDB indexes: {e}")

@app.on_event("shutdown")
async def shutdown_db():
    client.close()

# ✅ Health check
@app.get("/", tags=["root"], summary="Health check")
async def root():
    return {"ok": True, "status": "ok", "service": "Lexipic backend"}


class EchoRequest(BaseModel):
    message: Optional[Any] = None
    language: Optional[Any] = None

@app.post(f"{settings.API_PREFIX}/echo", tags=["root"], summary="Echo the payload back")
async def echo(req: EchoRequest):
    return {
        "ok": True,
        "received": {"message": req.message, "language": req.language},
        "info": "Echo from Lexipic backend",
    }

# ✅ Error handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=format_error_response(exc.detail),
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    detail = f"{location}: {first.get('msg')}" if location else str(first.get("msg", "Invalid request"))
    return JSONResponse(
        status_code=400,
        content=format_error_response(detail),
    )

@app.exception_handler(PyMongoError)
async def store_exception_handler(request: Request, exc: PyMongoError):
    logger.error(f"Store error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=format_error_response("Internal server error"),
    )

@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=format_error_response("Internal server error"),
    )

# ✅ Routes
app.include_router(auth.router,          prefix=f"{settings.API_PREFIX}/auth")
app.include_router(pictograms.router,    prefix=f"{settings.API_PREFIX}/pictograms")
app.include_router(messages.router,      prefix=f"{settings.API_PREFIX}/messages")
app.include_router(conversations.router, prefix=f"{settings.API_PREFIX}/conversations")
app.include_router(ws.router,            prefix=settings.API_PREFIX)
