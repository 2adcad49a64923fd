"""Pydantic models for auctioneer avatars and uploaded images."""

from pydantic import BaseModel, ConfigDict, Field


class AvatarDescriptor(BaseModel):
    """An auctioneer identity, either a vendor presenter or a custom image."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    name: str
    image: str
    voice: str = "Professional, AI-generated"
    specialty: str = ""
    voice_id: str = Field(alias="voiceId")
    gender: str | None = None
    is_streamable: bool = Field(default=False, alias="isStreamable")
    is_custom: bool = Field(default=False, alias="isCustom")
    has_custom_voice: bool = Field(default=False, alias="hasCustomVoice")


class AvatarListResponse(BaseModel):
    """Response body for GET /get-avatars."""

    avatars: list[AvatarDescriptor]


class UploadResponse(BaseModel):
    """Response body for POST /upload-avatar-image."""

    success: bool = True
    filename: str
    url: str
