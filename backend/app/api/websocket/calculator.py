"""WebSocket endpoint for live cost quotes while the form is being edited."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from app.api.v1.calculations import serialize_breakdown
from app.calculator.engine import quote

logger = logging.getLogger("app.websocket")

router = APIRouter()


def handle_form_message(raw: str) -> dict:
    """Turn one form-state message into the reply sent back to the client."""
    try:
        form = json.loads(raw)
    except json.JSONDecodeError:
        return {"error": "Malformed JSON"}
    if not isinstance(form, dict):
        return {"error": "Expected a JSON object"}

    try:
        breakdown = quote(
            form.get("price"),
            form.get("property_type", "resale"),
            form.get("region", "valencia"),
            form.get("include_mortgage") is True,
        )
    except ValueError as exc:
        return {"error": str(exc)}

    return {"result": serialize_breakdown(breakdown)}


@router.websocket("/ws/calculator")
async def calculator_quotes(websocket: WebSocket) -> None:
    """Recompute the breakdown on every form change the client sends."""
    await websocket.accept()
    logger.debug("ws calculator connected")
    try:
        while True:
            raw = await websocket.receive_text()
            await websocket.send_json(handle_form_message(raw))
    except WebSocketDisconnect:
        logger.debug("ws calculator disconnected")
