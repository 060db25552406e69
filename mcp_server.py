"""MCP Server for MemoryKeeper.

This module provides MCP tools for AI agents to manage recurring dates.
Mounted under /mcp by the REST API (sharing its record store), or run
standalone for local agents.

Dates are exchanged as ISO strings (YYYY-MM-DD).

Transport Support:
- stdio: Standard input/output (local process communication)
- sse: Server-Sent Events over HTTP (network access)
"""

import os
from datetime import date
from typing import Optional

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

import exporters
import recurrence
import view
import wish_generator
from config import settings
from logger_config import setup_logger
from schemas import RecordCreate, RecordUpdate
from store import DeleteNotConfirmedError, RecordNotFoundError, get_store

logger = setup_logger(__name__, 'mcp.log')
logger.info("MCP Server initialized")

# Create FastMCP server with host and port from settings
mcp = FastMCP(
    "MemoryKeeper",
    host=settings.MCP_HOST,
    port=settings.MCP_PORT
)


def _format_line(record, today: date) -> str:
    item = view.project(record, today)
    caption = f" · {item.age_caption}" if item.age_caption else ""
    urgent = " ⏰" if item.is_urgent else ""
    line = (
        f"\n• {item.title} - {item.category_label}{caption}\n"
        f"  ID: {item.id}\n"
        f"  Date: {item.origin_date.isoformat()} (每年 {item.month_day})\n"
        f"  In {item.days_until} day(s){urgent}"
    )
    if item.notes:
        line += f"\n  Notes: {item.notes}"
    return line


@mcp.tool()
def list_records(search: str = "", type: str = "ALL") -> str:
    """List recorded dates, soonest next occurrence first.

    Args:
        search: Optional case-insensitive title search
        type: "ALL" (default), "BIRTHDAY", "ANNIVERSARY" or "OTHER"

    Returns:
        Formatted list of records or message if none found
    """
    records = get_store().view(search, type)

    if not records:
        return "No records found."

    today = date.today()
    result = [f"Found {len(records)} record(s):\n"]
    for r in records:
        result.append(_format_line(r, today))
    return "\n".join(result)


@mcp.tool()
def get_record(record_id: str) -> str:
    """Get detailed information about a specific record.

    Args:
        record_id: Record ID

    Returns:
        Detailed record information or error message
    """
    try:
        record = get_store().get(record_id)
    except RecordNotFoundError:
        return "✗ Record not found."

    item = view.project(record)
    return (
        f"Record Details:\n"
        f"━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━\n"
        f"ID: {item.id}\n"
        f"Title: {item.title}\n"
        f"Type: {item.category_label} ({item.category.value})\n"
        f"Date: {item.origin_date.isoformat()} (每年 {item.month_day})\n"
        f"Next: {item.next_occurrence.isoformat()} (in {item.days_until} day(s))\n"
        f"Years: {item.elapsed_years}\n"
        f"Notes: {item.notes or 'N/A'}"
    )


@mcp.tool()
def add_record(name: str, date: str, type: str = "BIRTHDAY", notes: Optional[str] = None) -> str:
    """Record a new birthday, anniversary or other recurring date.

    Args:
        name: Title, e.g. "妈妈生日"
        date: Origin date in ISO format (e.g., "1975-05-20")
        type: "BIRTHDAY" (default), "ANNIVERSARY" or "OTHER"
        notes: Optional notes

    Returns:
        Success message with record ID, or error message
    """
    try:
        logger.info(f"📝 Adding record: {name} | Date: {date}")
        data = RecordCreate.model_validate({"name": name, "date": date, "type": type.upper(), "notes": notes})
        record = get_store().add(data)[-1]
        days = recurrence.days_until_next_occurrence(record.origin_date)
        return (
            f"✓ Record added successfully!\n"
            f"ID: {record.id}\n"
            f"Title: {record.title}\n"
            f"Next occurrence in {days} day(s)"
        )
    except ValidationError as e:
        return f"✗ Error adding record: {str(e)}"


@mcp.tool()
def update_record(
    record_id: str,
    name: Optional[str] = None,
    date: Optional[str] = None,
    type: Optional[str] = None,
    notes: Optional[str] = None
) -> str:
    """Edit an existing record. Only provided fields change.

    Args:
        record_id: Record ID
        name: Optional new title
        date: Optional new origin date (ISO format)
        type: Optional new type - "BIRTHDAY", "ANNIVERSARY" or "OTHER"
        notes: Optional new notes; an empty string clears them

    Returns:
        Success message or error message
    """
    updates = {}
    if name is not None:
        updates['name'] = name
    if date is not None:
        updates['date'] = date
    if type is not None:
        updates['type'] = type.upper()
    if notes is not None:
        updates['notes'] = notes or None

    try:
        snapshot = get_store().update(record_id, RecordUpdate.model_validate(updates))
        record = next(r for r in snapshot if r.id == record_id)
    except RecordNotFoundError:
        return "✗ Record not found."
    except ValidationError as e:
        return f"✗ Error updating record: {str(e)}"

    return (
        f"✓ Record updated successfully!\n"
        f"ID: {record.id}\n"
        f"Title: {record.title}\n"
        f"Date: {record.origin_date.isoformat()}"
    )


@mcp.tool()
def delete_record(record_id: str, confirm: bool = False) -> str:
    """Delete a record. Deletion cannot be undone.

    Args:
        record_id: Record ID
        confirm: Must be True; call again with confirm=True after asking the user

    Returns:
        Success message, the confirmation prompt, or error message
    """
    try:
        get_store().remove(record_id, confirmed=confirm)
    except RecordNotFoundError:
        return "✗ Record not found."
    except DeleteNotConfirmedError as e:
        return f"⚠ {e} (call again with confirm=True)"
    return f"✓ Record {record_id} deleted successfully."


@mcp.tool()
def export_records(format: str = "txt", search: str = "", type: str = "ALL") -> str:
    """Export the current list as CSV or TXT text.

    Args:
        format: "csv" or "txt" (default)
        search: Optional case-insensitive title search
        type: "ALL" (default), "BIRTHDAY", "ANNIVERSARY" or "OTHER"

    Returns:
        Suggested file name followed by the file content
    """
    exporter = exporters.EXPORTERS.get(format.lower())
    if exporter is None:
        return f"✗ Unknown export format: {format}"

    export = exporter(get_store().view(search, type))
    return f"{export.filename}\n\n{export.content.lstrip(chr(0xFEFF))}"


@mcp.tool()
async def generate_wish(record_id: str) -> str:
    """Draft a short greeting (in Chinese) for a record.

    Args:
        record_id: Record ID

    Returns:
        Greeting text; a fixed default greeting if generation is unavailable
    """
    try:
        record = get_store().get(record_id)
    except RecordNotFoundError:
        return "✗ Record not found."

    result = await wish_generator.generate_wish(record)
    return result.text


if __name__ == "__main__":
    # Get transport from environment or config
    transport = os.getenv("MCP_TRANSPORT", settings.MCP_TRANSPORT).lower()

    if transport == "sse":
        host = settings.MCP_HOST
        port = settings.MCP_PORT

        print(f"Starting MCP server with SSE transport on {host}:{port}")
        print(f"SSE endpoint: http://{host}:{port}/sse")

        mcp.run(transport="sse")
    else:
        print("Starting MCP server with stdio transport")
        mcp.run(transport="stdio")
