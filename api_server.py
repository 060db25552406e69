"""FastAPI REST API server for MemoryKeeper.

This module provides HTTP endpoints for managing recurring personal dates,
viewing them ordered by urgency, exporting them and drafting greetings.

The record set is owned by one RecordStore per process; every mutation
persists the set, and every list request recomputes the view. The MCP
tools are mounted under /mcp so both surfaces share that store.
"""

from datetime import date
from typing import List, Optional
from urllib.parse import quote

from fastapi import FastAPI, Depends, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

import exporters
import schemas
import view
import wish_generator
from config import settings
from logger_config import setup_logger
from mcp_server import mcp
from store import DeleteNotConfirmedError, RecordNotFoundError, RecordStore, get_store

logger = setup_logger(__name__, 'api.log')

TYPE_FILTER_PATTERN = "^(ALL|all|BIRTHDAY|ANNIVERSARY|OTHER)$"

# Create FastAPI application
app = FastAPI(
    title="MemoryKeeper API",
    description="Birthdays, anniversaries and other recurring dates, ordered by how soon they come round",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# MCP tools over SSE, sharing this process's record store
app.mount("/mcp", mcp.sse_app())


def _project_all(records, today: Optional[date] = None) -> List[schemas.RecordView]:
    today = today or date.today()
    return [view.project(r, today) for r in records]


@app.get("/")
def root():
    """Root endpoint - service information"""
    return {
        "service": "MemoryKeeper API",
        "version": "1.0.0",
        "status": "healthy",
        "endpoints": {
            "docs": "/docs",
            "health": "/health",
            "records": "/records",
            "export": "/export/{csv|txt}"
        }
    }


@app.get("/health")
def health_check(store: RecordStore = Depends(get_store)):
    """Health check endpoint for monitoring"""
    snapshot = store.snapshot()
    return {
        "status": "healthy",
        "service": "memory_keeper",
        "database": settings.DATABASE_URL.split("://")[0],
        "records": len(snapshot) if snapshot is not None else None
    }


@app.get("/records", response_model=List[schemas.RecordView])
def list_records(
    search: str = Query("", description="Case-insensitive title search"),
    type_filter: str = Query("ALL", alias="type", pattern=TYPE_FILTER_PATTERN, description="Category filter"),
    store: RecordStore = Depends(get_store)
):
    """List records, soonest next occurrence first.

    Query parameters:
    - search: Optional - substring matched against titles
    - type: Optional - ALL (default), BIRTHDAY, ANNIVERSARY or OTHER
    """
    return _project_all(store.view(search, type_filter))


@app.get("/records/upcoming", response_model=schemas.RecordView)
def upcoming_record(
    search: str = Query("", description="Case-insensitive title search"),
    type_filter: str = Query("ALL", alias="type", pattern=TYPE_FILTER_PATTERN, description="Category filter"),
    store: RecordStore = Depends(get_store)
):
    """Get the record whose next occurrence comes first."""
    record = view.upcoming(store.snapshot() or (), search, type_filter)
    if record is None:
        raise HTTPException(status_code=404, detail="No upcoming records")
    return view.project(record)


@app.post("/records", response_model=schemas.RecordView, status_code=201)
def create_record(
    record: schemas.RecordCreate,
    store: RecordStore = Depends(get_store)
):
    """Create a new record.

    Request body example:
    ```json
    {
        "name": "妈妈生日",
        "date": "1975-05-20",
        "type": "BIRTHDAY",
        "notes": "喜欢花"
    }
    ```

    ``type`` defaults to BIRTHDAY. Empty names and invalid dates are rejected with 422.
    """
    snapshot = store.add(record)
    return view.project(snapshot[-1])


@app.get("/records/{record_id}", response_model=schemas.RecordView)
def get_record(record_id: str, store: RecordStore = Depends(get_store)):
    """Get a specific record by ID."""
    try:
        return view.project(store.get(record_id))
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Record not found")


@app.put("/records/{record_id}", response_model=schemas.RecordView)
def update_record(
    record_id: str,
    updates: schemas.RecordUpdate,
    store: RecordStore = Depends(get_store)
):
    """Edit an existing record.

    Only provided fields will be updated; the record keeps its ID.
    """
    try:
        snapshot = store.update(record_id, updates)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Record not found")

    edited = next(r for r in snapshot if r.id == record_id)
    return view.project(edited)


@app.delete("/records/{record_id}", status_code=200)
def delete_record(
    record_id: str,
    confirm: bool = Query(False, description="Must be true to delete"),
    store: RecordStore = Depends(get_store)
):
    """Delete a record.

    Deletion cannot be undone, so it needs ``?confirm=true``;
    without it the API answers 409 with the confirmation prompt.
    """
    try:
        store.remove(record_id, confirmed=confirm)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Record not found")
    except DeleteNotConfirmedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"message": "Record deleted successfully", "record_id": record_id}


@app.get("/export/{fmt}")
def export_records(
    fmt: str,
    search: str = Query("", description="Case-insensitive title search"),
    type_filter: str = Query("ALL", alias="type", pattern=TYPE_FILTER_PATTERN, description="Category filter"),
    store: RecordStore = Depends(get_store)
):
    """Download the current view as CSV or TXT."""
    exporter = exporters.EXPORTERS.get(fmt.lower())
    if exporter is None:
        raise HTTPException(status_code=404, detail=f"Unknown export format: {fmt}")

    export = exporter(store.view(search, type_filter))
    logger.info(f"Exporting {fmt.lower()} as {export.filename}")
    return Response(
        content=export.data,
        media_type=export.media_type,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(export.filename)}"}
    )


@app.post("/records/{record_id}/wish", response_model=schemas.WishResult)
async def generate_wish(record_id: str, store: RecordStore = Depends(get_store)):
    """Draft a greeting for a record.

    Never fails because of the remote service: a fixed fallback message
    is returned with ``is_fallback`` set instead.
    """
    try:
        record = store.get(record_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Record not found")
    return await wish_generator.generate_wish(record)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level="info"
    )
