"""D-ID gateway: translates generic video requests into vendor calls and back."""

from __future__ import annotations

import base64
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from src.live_auctioneer.errors import (
    ConfigurationError,
    TransportError,
    ValidationError,
    VendorRejected,
)
from src.live_auctioneer.models.avatar import AvatarDescriptor
from src.live_auctioneer.models.video import GenerationMode, GenerationRequest, Job, JobState
from src.live_auctioneer.services.catalog import FALLBACK_AVATARS
from src.live_auctioneer.services.voices import (
    AMAZON_PROVIDER,
    default_source_voice,
    map_voice,
    resolve_voice_for_custom_avatar,
)

if TYPE_CHECKING:
    from src.live_auctioneer.config import Settings

logger = structlog.get_logger()

STATUS_PATHS = {
    GenerationMode.registered_presenter: "/clips",
    GenerationMode.custom_image: "/talks",
}


def format_voice_param(value: float | None) -> str:
    """Render rate/pitch the way the vendor expects: ``1``, ``1.5``, ``1234567``."""
    if value is None or value == 0:
        value = 1
    if value < 0:
        raise ValidationError("Speech rate and pitch must be positive")
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


class DIDGateway:
    """Stateless translator between GenerationRequest/Job and the D-ID API."""

    def __init__(
        self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> None:
        self.settings = settings
        self.api_url = settings.did_api_url.rstrip("/")
        self.timeout = httpx.Timeout(timeout=settings.did_request_timeout)
        self.presenter_list_limit = settings.presenter_list_limit
        self._transport = transport

        logger.info(
            "DIDGateway initialized",
            api_url=self.api_url,
            configured=settings.did_configured,
        )

    # ---- HTTP plumbing ----

    def _ensure_configured(self) -> None:
        if not self.settings.did_configured:
            raise ConfigurationError()

    def _auth_headers(self) -> dict[str, str]:
        self._ensure_configured()
        token = base64.b64encode(self.settings.did_api_key.encode()).decode("ascii")
        return {"Authorization": f"Basic {token}", "Content-Type": "application/json"}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.api_url, timeout=self.timeout, transport=self._transport
        )

    async def _request(
        self,
        method: str,
        path: str,
        default_error: str,
        json: dict[str, Any] | None = None,
    ) -> Any:
        headers = self._auth_headers()
        try:
            async with self._client() as client:
                resp = await client.request(method, path, headers=headers, json=json)
        except httpx.HTTPError as e:
            logger.error("D-ID request failed", method=method, path=path, error=str(e))
            raise TransportError() from e

        try:
            data = resp.json()
        except ValueError:
            data = None

        logger.debug("D-ID response", path=path, status=resp.status_code)

        if resp.is_error:
            message = default_error
            if isinstance(data, dict):
                message = data.get("message") or data.get("error") or default_error
            logger.warning(
                "D-ID rejected request", path=path, status=resp.status_code, message=message
            )
            raise VendorRejected(resp.status_code, str(message))

        if data is None:
            logger.error("D-ID returned an undecodable body", path=path, status=resp.status_code)
            raise TransportError()
        return data

    @staticmethod
    def _job_id(data: Any) -> str:
        job_id = data.get("id") if isinstance(data, dict) else None
        if not job_id:
            raise TransportError("No video ID returned")
        return str(job_id)

    # ---- Payload builders ----

    @staticmethod
    def _script(text: str, voice_id: str, provider: str, req: GenerationRequest) -> dict[str, Any]:
        return {
            "type": "text",
            "input": text,
            "provider": {
                "type": provider,
                "voice_id": voice_id,
                "voice_config": {
                    "rate": format_voice_param(req.speech_rate),
                    "pitch": format_voice_param(req.speech_pitch),
                },
            },
        }

    def build_presenter_payload(self, req: GenerationRequest) -> dict[str, Any]:
        voice = map_voice(req.voice_id, req.gender)
        return {
            "presenter_id": req.presenter_ref,
            "script": self._script(req.text, voice, AMAZON_PROVIDER, req),
            "background": {"color": "#FFFFFF"},
        }

    def build_custom_image_payload(self, req: GenerationRequest) -> dict[str, Any]:
        selection = resolve_voice_for_custom_avatar(req.voice_id, req.gender, req.has_custom_voice)
        return {
            "source_url": self.resolve_image_url(req.presenter_ref),
            "script": self._script(req.text, selection.voice_id, selection.provider, req),
            "config": {
                "fluent": True,
                "pad_audio": 0.0,
                "stitch": True,
                "result_format": "mp4",
            },
        }

    def resolve_image_url(self, image_url: str) -> str:
        """Turn a locally served upload path into an absolute URL the vendor can fetch."""
        if image_url.startswith(self.settings.avatars_url_prefix):
            return f"{self.settings.resolve_public_base_url()}{image_url}"
        return image_url

    # ---- Job submission ----

    async def submit_presenter_job(self, req: GenerationRequest) -> str:
        """Create a clip for a pre-registered presenter and return the vendor job id."""
        self._ensure_configured()
        if not req.text or not req.presenter_ref or not req.voice_id:
            logger.info(
                "Missing parameters",
                text=bool(req.text),
                presenter=bool(req.presenter_ref),
                voice_id=bool(req.voice_id),
            )
            raise ValidationError("Missing required parameters")

        payload = self.build_presenter_payload(req)
        data = await self._request("POST", "/clips", "Failed to create video", json=payload)
        job_id = self._job_id(data)
        logger.info(
            "Video job submitted", job_id=job_id, mode=GenerationMode.registered_presenter.value
        )
        return job_id

    async def submit_custom_image_job(self, req: GenerationRequest) -> str:
        """Create a talk from an arbitrary image and return the vendor job id."""
        self._ensure_configured()
        if not req.text or not req.presenter_ref:
            raise ValidationError("Missing required parameters: text and imageUrl")

        payload = self.build_custom_image_payload(req)
        logger.info(
            "Submitting custom avatar video",
            source_url=payload["source_url"],
            provider=payload["script"]["provider"]["type"],
        )
        data = await self._request(
            "POST", "/talks", "Failed to create custom avatar video", json=payload
        )
        job_id = self._job_id(data)
        logger.info("Video job submitted", job_id=job_id, mode=GenerationMode.custom_image.value)
        return job_id

    # ---- Job status ----

    async def get_job_status(self, job_id: str | None, mode: GenerationMode) -> Job:
        """Query the resource family matching the job's originating mode."""
        self._ensure_configured()
        if not job_id:
            raise ValidationError("Video ID is required")

        default_error = (
            "Failed to check custom video status"
            if mode == GenerationMode.custom_image
            else "Failed to check video status"
        )
        data = await self._request("GET", f"{STATUS_PATHS[mode]}/{job_id}", default_error)
        body = data if isinstance(data, dict) else {}
        raw_status = str(body["status"]) if body.get("status") is not None else None
        job = Job(
            id=job_id,
            state=JobState.from_vendor(raw_status),
            raw_status=raw_status,
            result_url=body.get("result_url") or None,
        )
        logger.info("Video status checked", job_id=job_id, mode=mode.value, status=raw_status)
        return job

    # ---- Presenters ----

    @staticmethod
    def _presenter_entries(data: Any) -> list[Any]:
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            if isinstance(data.get("presenters"), list):
                return data["presenters"]
            if isinstance(data.get("result"), list):
                return data["result"]
            return list(data.values())
        return []

    @staticmethod
    def _to_descriptor(entry: Any) -> AvatarDescriptor | None:
        if not isinstance(entry, dict):
            return None
        presenter_id = entry.get("presenter_id")
        image = entry.get("image_url") or entry.get("thumbnail_url")
        if not presenter_id or not image:
            return None

        gender = entry.get("gender")
        voice = entry.get("voice") if isinstance(entry.get("voice"), dict) else None
        streamable = bool(entry.get("is_streamable"))
        return AvatarDescriptor(
            id=str(presenter_id),
            name=entry.get("name") or f"Avatar {presenter_id}",
            image=image,
            voice=(
                f"{voice.get('type')} ({voice.get('voice_id')})"
                if voice
                else "Professional, AI-generated"
            ),
            specialty=f"{gender} presenter, {'streamable' if streamable else 'high-quality'}",
            voice_id=(voice or {}).get("voice_id") or default_source_voice(gender),
            gender=gender,
            is_streamable=streamable,
        )

    async def list_presenters(self) -> list[AvatarDescriptor]:
        """Fetch vendor presenters, falling back to the built-in pair when none are usable."""
        data = await self._request("GET", "/clips/presenters", "Failed to fetch avatars")
        entries = self._presenter_entries(data)[: self.presenter_list_limit]
        avatars = [d for d in (self._to_descriptor(e) for e in entries) if d is not None]
        if not avatars:
            logger.info("No presenters returned, using fallback avatars")
            return list(FALLBACK_AVATARS)
        return avatars
