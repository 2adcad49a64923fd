"""HTTP client for the Live Auctioneer server, as used by the auction page."""

from typing import Any

import httpx
import structlog

from src.live_auctioneer.errors import TransportError, error_from_payload
from src.live_auctioneer.models.avatar import AvatarDescriptor, UploadResponse
from src.live_auctioneer.models.video import GenerationMode, Job, JobState

logger = structlog.get_logger()

STATUS_ENDPOINTS = {
    GenerationMode.registered_presenter: "/check-video-status",
    GenerationMode.custom_image: "/check-custom-video-status",
}


class AuctionApiClient:
    """Thin async wrapper over the server endpoints; errors come back as taxonomy errors."""

    def __init__(
        self,
        base_url: str,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = httpx.Timeout(timeout=timeout)
        self._transport = transport

    async def _call(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.request(method, path, **kwargs)
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Server request failed", path=path, error=str(e))
            raise TransportError(str(e) or None) from e

        if resp.is_error:
            raise error_from_payload(resp.status_code, data)
        return data

    async def generate_video(
        self,
        text: str,
        avatar_image: str,
        voice_id: str,
        gender: str | None = None,
        speech_rate: float | None = None,
        speech_pitch: float | None = None,
    ) -> str:
        data = await self._call(
            "POST",
            "/generate-video",
            json={
                "text": text,
                "avatarImage": avatar_image,
                "voiceId": voice_id,
                "gender": gender,
                "speechRate": speech_rate,
                "speechPitch": speech_pitch,
            },
        )
        return self._video_id(data)

    async def generate_custom_avatar_video(
        self,
        text: str,
        image_url: str,
        voice_id: str,
        gender: str | None = None,
        has_custom_voice: bool = False,
        speech_rate: float | None = None,
        speech_pitch: float | None = None,
    ) -> str:
        data = await self._call(
            "POST",
            "/upload-custom-avatar",
            json={
                "text": text,
                "imageUrl": image_url,
                "voiceId": voice_id,
                "gender": gender,
                "hasCustomVoice": has_custom_voice,
                "speechRate": speech_rate,
                "speechPitch": speech_pitch,
            },
        )
        return self._video_id(data)

    @staticmethod
    def _video_id(data: dict[str, Any]) -> str:
        video_id = data.get("videoId")
        if not video_id:
            raise TransportError("No video ID returned")
        return str(video_id)

    async def check_status(self, video_id: str, mode: GenerationMode) -> Job:
        data = await self._call("GET", STATUS_ENDPOINTS[mode], params={"videoId": video_id})
        raw_status = data.get("status")
        return Job(
            id=video_id,
            state=JobState.from_vendor(raw_status),
            raw_status=raw_status,
            result_url=data.get("result_url"),
        )

    async def check_video_status(self, video_id: str) -> Job:
        return await self.check_status(video_id, GenerationMode.registered_presenter)

    async def check_custom_video_status(self, video_id: str) -> Job:
        return await self.check_status(video_id, GenerationMode.custom_image)

    async def get_avatars(self) -> list[AvatarDescriptor]:
        data = await self._call("GET", "/get-avatars")
        return [AvatarDescriptor.model_validate(a) for a in data.get("avatars", [])]

    async def upload_avatar_image(
        self, filename: str, content: bytes, content_type: str
    ) -> UploadResponse:
        data = await self._call(
            "POST", "/upload-avatar-image", files={"avatar": (filename, content, content_type)}
        )
        return UploadResponse.model_validate(data)
