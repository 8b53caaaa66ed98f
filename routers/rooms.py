# routers/rooms.py
from fastapi import APIRouter, HTTPException, Request

router = APIRouter()


@router.get("/rooms/")
def list_rooms(request: Request):
    snapshot = request.app.state.registry.snapshot()
    return {
        "rooms": [
            {"room_id": room_id, "participants": participants}
            for room_id, participants in snapshot.items()
        ]
    }


@router.get("/rooms/{room_id}")
def get_participants(room_id: str, request: Request):
    registry = request.app.state.registry
    if room_id not in registry:
        raise HTTPException(status_code=404, detail="Room not found")
    return {"room_id": room_id, "participants": sorted(registry.members_of(room_id))}
