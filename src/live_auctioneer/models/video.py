"""Pydantic models for video generation jobs."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class GenerationMode(str, Enum):
    """Which vendor resource family a job belongs to."""

    registered_presenter = "registered_presenter"
    custom_image = "custom_image"


class JobState(str, Enum):
    """Canonical job state; vendor labels other than done/error collapse to processing."""

    pending = "pending"
    processing = "processing"
    done = "done"
    error = "error"

    @classmethod
    def from_vendor(cls, label: str | None) -> "JobState":
        if label == cls.done.value:
            return cls.done
        if label == cls.error.value:
            return cls.error
        return cls.processing


class GenerationRequest(BaseModel):
    """Vendor-neutral description of one talking-avatar video."""

    text: str | None = None
    presenter_ref: str | None = None
    voice_id: str | None = None
    gender: str | None = None
    speech_rate: float | None = None
    speech_pitch: float | None = None
    has_custom_voice: bool = False
    mode: GenerationMode = GenerationMode.registered_presenter


class Job(BaseModel):
    """Snapshot of a vendor job as seen by one status query."""

    id: str
    state: JobState = JobState.pending
    raw_status: str | None = None
    result_url: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state in (JobState.done, JobState.error)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class GenerateVideoRequest(_CamelModel):
    """Request body for POST /generate-video."""

    text: str | None = None
    avatar_image: str | None = Field(default=None, alias="avatarImage")
    voice_id: str | None = Field(default=None, alias="voiceId")
    gender: str | None = None
    speech_rate: float | None = Field(default=None, alias="speechRate")
    speech_pitch: float | None = Field(default=None, alias="speechPitch")

    def to_generation_request(self) -> GenerationRequest:
        return GenerationRequest(
            text=self.text,
            presenter_ref=self.avatar_image,
            voice_id=self.voice_id,
            gender=self.gender,
            speech_rate=self.speech_rate,
            speech_pitch=self.speech_pitch,
            mode=GenerationMode.registered_presenter,
        )


class CustomAvatarVideoRequest(_CamelModel):
    """Request body for POST /upload-custom-avatar."""

    text: str | None = None
    image_url: str | None = Field(default=None, alias="imageUrl")
    voice_id: str | None = Field(default=None, alias="voiceId")
    gender: str | None = None
    has_custom_voice: bool | None = Field(default=None, alias="hasCustomVoice")
    speech_rate: float | None = Field(default=None, alias="speechRate")
    speech_pitch: float | None = Field(default=None, alias="speechPitch")

    def to_generation_request(self) -> GenerationRequest:
        return GenerationRequest(
            text=self.text,
            presenter_ref=self.image_url,
            voice_id=self.voice_id,
            gender=self.gender,
            speech_rate=self.speech_rate,
            speech_pitch=self.speech_pitch,
            has_custom_voice=bool(self.has_custom_voice),
            mode=GenerationMode.custom_image,
        )


class VideoJobResponse(_CamelModel):
    """Response of the job submission endpoints."""

    video_id: str = Field(alias="videoId")


class VideoStatusResponse(BaseModel):
    """Response of the status endpoints; ``status`` is the vendor's raw label."""

    status: str | None = None
    state: JobState
    result_url: str | None = None

    @classmethod
    def from_job(cls, job: Job) -> "VideoStatusResponse":
        return cls(status=job.raw_status, state=job.state, result_url=job.result_url)
