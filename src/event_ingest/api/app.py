"""FastAPI application for the event ingestion API."""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from event_ingest.api.routes.events import router as events_router
from event_ingest.api.routes.health import router as health_router
from event_ingest.api.routes.ingest import router as ingest_router
from event_ingest.errors import AuthError, IngestError

app = FastAPI(title="Event Ingest API", version="0.1.0")

# CORS for the browser client dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:5173"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    return JSONResponse({"ok": False, "error": str(exc)}, status_code=401)


@app.exception_handler(IngestError)
async def ingest_error_handler(request: Request, exc: IngestError) -> JSONResponse:
    """Config, upstream and storage failures all surface as 500."""
    return JSONResponse({"ok": False, "error": str(exc)}, status_code=500)


app.include_router(health_router)
app.include_router(events_router)
app.include_router(ingest_router)
