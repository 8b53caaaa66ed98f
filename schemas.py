from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Any, Optional, Union


class MalformedEnvelope(ValueError):
    """A frame that is not a JSON object naming an event."""


class Envelope(BaseModel):
    event: str
    data: Any = None
    id: Optional[Union[int, str]] = None


class RoomRequest(BaseModel):
    # browser clients emit the bare room id for joinRoom/leaveRoom
    room_id: str = Field(alias="roomId")

    @model_validator(mode="before")
    @classmethod
    def _bare_room_id(cls, value):
        if isinstance(value, str):
            return {"roomId": value}
        return value


def _require_value(value):
    if value is None:
        raise ValueError("session description must not be null")
    return value


# Session descriptions and candidates are forwarded untouched.

class StreamOffer(BaseModel):
    offer: Any
    room_id: str = Field(alias="roomId")
    to: Optional[str] = None

    @field_validator("offer")
    @classmethod
    def offer_present(cls, value):
        return _require_value(value)


class StreamAnswer(BaseModel):
    answer: Any
    room_id: str = Field(alias="roomId")
    to: str

    @field_validator("answer")
    @classmethod
    def answer_present(cls, value):
        return _require_value(value)


class IceCandidate(BaseModel):
    # null is the end-of-candidates marker
    candidate: Any
    room_id: str = Field(alias="roomId")
    to: str
