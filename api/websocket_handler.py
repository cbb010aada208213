"""WebSocket handler for live mission tracking."""

import json
from typing import Dict
from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from schemas.auth import SessionUser
from schemas.enums import MissionTier
from schemas.mission import GeoPoint, MissionsResponse
from schemas.websocket import WebSocketMessage, WebSocketResponse
from services.geofence import GeofenceTracker, LOCATION_SLOT
from services.mission_service import MissionService
from utils.logger import setup_logger

logger = setup_logger(__name__)


class MissionTrackingHandler:
    """Handler for mission tracking connections.

    Each connection owns a geofence tracker. Clients push positions; the
    handler answers with the distance to the target and announces the
    special mission once the user arrives. Missions are pushed again
    whenever the user's BMI category changes.
    """

    def __init__(self):
        self.active_connections: Dict[str, WebSocket] = {}

    async def connect(self, websocket: WebSocket, session_id: str):
        """Accept a WebSocket connection."""
        await websocket.accept()
        self.active_connections[session_id] = websocket
        logger.info(f"Mission WebSocket connected: {session_id}")

    def disconnect(self, session_id: str):
        """Remove a WebSocket connection."""
        if session_id in self.active_connections:
            del self.active_connections[session_id]
            logger.info(f"Mission WebSocket disconnected: {session_id}")

    async def send(self, session_id: str, event: str, data):
        """Send an event to a specific session."""
        websocket = self.active_connections.get(session_id)
        if websocket is None:
            return
        try:
            message = WebSocketResponse(event=event, data=data, session_id=session_id)
            await websocket.send_json(message.model_dump(mode="json"))
        except Exception as e:
            logger.error(f"Error sending message to {session_id}: {e}")
            self.disconnect(session_id)

    async def run(self, websocket: WebSocket, session_id: str, user: SessionUser, missions: MissionService):
        """Serve one connection until the client leaves."""
        await self.connect(websocket, session_id)
        await self.send(session_id, "connected", {"message": "Connected to mission tracking", "user_id": user.uid})

        tracker = GeofenceTracker()

        async def push_missions(result: MissionsResponse):
            await self.send(session_id, "missions", result.model_dump(mode="json"))

        unsubscribe = None
        try:
            unsubscribe = await missions.subscribe_missions(user.uid, push_missions)
            while True:
                raw = await websocket.receive_text()
                await self.handle_message(raw, session_id, user, missions, tracker)
        except WebSocketDisconnect:
            logger.info(f"Mission WebSocket closed by client: {session_id}")
        except Exception as e:
            logger.error(f"Mission WebSocket error: {e}", exc_info=True)
        finally:
            if unsubscribe is not None:
                unsubscribe()
            self.disconnect(session_id)

    async def handle_message(
        self,
        raw: str,
        session_id: str,
        user: SessionUser,
        missions: MissionService,
        tracker: GeofenceTracker,
    ):
        """Handle one client message."""
        try:
            message = WebSocketMessage(**json.loads(raw))
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            logger.error(f"Invalid message on {session_id}: {e}")
            await self.send(session_id, "error", {"message": "Invalid message format"})
            return

        try:
            if message.event == "target":
                tracker.set_target(GeoPoint(**message.data))
                await self.send(session_id, "target", tracker.target.model_dump())

            elif message.event == "position":
                position = GeoPoint(**message.data)
                distance, completed = await missions.update_position(user.uid, tracker, position)
                await self.send(session_id, "position", {
                    "distance_m": round(distance, 1),
                    "target": tracker.target.model_dump() if tracker.target else None,
                })
                if completed is not None:
                    mission = completed.missions.tier(MissionTier.SPECIAL)[LOCATION_SLOT]
                    await self.send(session_id, "mission_completed", {
                        "title": mission.title,
                        "missions": completed.model_dump(mode="json"),
                    })

            elif message.event == "position_error":
                # Permission denied or no fix: tracking stops, the app carries on
                await self.send(session_id, "status", {"message": "Location unavailable, tracking paused"})

            else:
                await self.send(session_id, "error", {"message": f"Unknown event '{message.event}'"})

        except ValidationError as e:
            await self.send(session_id, "error", {"message": f"Invalid coordinates: {e.errors()[0]['msg']}"})
        except Exception as e:
            logger.error(f"Error handling {message.event} on {session_id}: {e}", exc_info=True)
            await self.send(session_id, "error", {"message": f"Error processing request: {str(e)}"})


# Global mission tracking handler instance
tracking_handler = MissionTrackingHandler()
