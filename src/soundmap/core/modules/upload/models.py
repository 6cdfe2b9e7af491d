from pydantic import BaseModel, Field


class UploadedAudio(BaseModel):
    """Audio clip persisted to the object store."""

    key: str = Field(..., description="Object store key, e.g. audio/1700000000000-k3j9x0ab.webm")
    url: str = Field(..., description="Public URL path of the clip")
    content_type: str
    size: int = Field(..., ge=1)
