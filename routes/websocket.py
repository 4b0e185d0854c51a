from fastapi import APIRouter, WebSocket, WebSocketDisconnect
import json
import logging

logger = logging.getLogger(__name__)

websocket_router = APIRouter(
    tags=["websocket"])

# Open dashboard connections
active_connections: list[WebSocket] = []

@websocket_router.websocket("/ws/bookings")
async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for receiving booking events.

    Accepts a WebSocket connection and keeps it open until the client disconnects.
    Messages received from the client are ignored.

    Args:
        websocket (WebSocket): The incoming WebSocket connection.
    """
    await websocket.accept()
    active_connections.append(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        active_connections.remove(websocket)

async def broadcast_booking_event(event_type: str, booking_data: dict):
    """
    Broadcasts a booking event to all active WebSocket connections.

    A connection that fails to receive is dropped; the booking itself is never affected.

    Args:
        event_type (str): The type of event (e.g., "BOOKING_CREATED").
        booking_data (dict): The booking data to be sent to clients.
    """
    message = json.dumps({
        "event": event_type,
        "data": booking_data
    })
    for connection in list(active_connections):
        try:
            await connection.send_text(message)
        except Exception as e:
            logger.warning("Dropping websocket connection: %s", e)
            active_connections.remove(connection)
