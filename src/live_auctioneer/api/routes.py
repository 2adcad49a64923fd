"""FastAPI route handlers for the Live Auctioneer API."""

from typing import Any

import structlog
from fastapi import APIRouter, File, Query, Request, UploadFile

from src.live_auctioneer.errors import InvalidInput, LiveAuctioneerError
from src.live_auctioneer.models.auction import AuctionInfo, AuctionLot, AuctionScript
from src.live_auctioneer.models.avatar import AvatarListResponse, UploadResponse
from src.live_auctioneer.models.video import (
    CustomAvatarVideoRequest,
    GenerateVideoRequest,
    GenerationMode,
    VideoJobResponse,
    VideoStatusResponse,
)
from src.live_auctioneer.services.catalog import featured_avatar

logger = structlog.get_logger()


def create_router() -> APIRouter:
    """Create the API router with all endpoints."""
    router = APIRouter()

    def _get_gateway(request: Request):
        return request.app.state.gateway

    def _internal_error(event: str, e: Exception) -> LiveAuctioneerError:
        logger.error(event, error=str(e))
        return LiveAuctioneerError()

    @router.get("/health")
    async def health_check(request: Request) -> dict[str, Any]:
        settings = request.app.state.settings
        return {
            "status": "healthy",
            "services": {"did_configured": settings.did_configured},
            "did_api_url": settings.did_api_url,
        }

    @router.post("/generate-video", response_model=VideoJobResponse)
    async def generate_video(request: Request, body: GenerateVideoRequest) -> VideoJobResponse:
        """Create a video for a pre-registered vendor presenter."""
        gateway = _get_gateway(request)
        logger.info(
            "Generate video request",
            avatar=body.avatar_image,
            voice_id=body.voice_id,
            gender=body.gender,
        )
        try:
            job_id = await gateway.submit_presenter_job(body.to_generation_request())
            return VideoJobResponse(video_id=job_id)
        except LiveAuctioneerError:
            raise
        except Exception as e:
            raise _internal_error("Generate video failed", e) from e

    @router.post("/upload-custom-avatar", response_model=VideoJobResponse)
    async def upload_custom_avatar(
        request: Request, body: CustomAvatarVideoRequest
    ) -> VideoJobResponse:
        """Create a video from a custom avatar image."""
        gateway = _get_gateway(request)
        logger.info(
            "Custom avatar video request",
            image_url=body.image_url,
            voice_id=body.voice_id,
            has_custom_voice=body.has_custom_voice,
        )
        try:
            job_id = await gateway.submit_custom_image_job(body.to_generation_request())
            return VideoJobResponse(video_id=job_id)
        except LiveAuctioneerError:
            raise
        except Exception as e:
            raise _internal_error("Custom avatar video failed", e) from e

    async def _check_status(
        request: Request, video_id: str | None, mode: GenerationMode
    ) -> VideoStatusResponse:
        gateway = _get_gateway(request)
        try:
            job = await gateway.get_job_status(video_id, mode)
            return VideoStatusResponse.from_job(job)
        except LiveAuctioneerError:
            raise
        except Exception as e:
            raise _internal_error("Video status check failed", e) from e

    @router.get("/check-video-status", response_model=VideoStatusResponse)
    async def check_video_status(
        request: Request, video_id: str | None = Query(default=None, alias="videoId")
    ) -> VideoStatusResponse:
        return await _check_status(request, video_id, GenerationMode.registered_presenter)

    @router.get("/check-custom-video-status", response_model=VideoStatusResponse)
    async def check_custom_video_status(
        request: Request, video_id: str | None = Query(default=None, alias="videoId")
    ) -> VideoStatusResponse:
        return await _check_status(request, video_id, GenerationMode.custom_image)

    @router.get("/get-avatars", response_model=AvatarListResponse)
    async def get_avatars(request: Request) -> AvatarListResponse:
        gateway = _get_gateway(request)
        try:
            return AvatarListResponse(avatars=await gateway.list_presenters())
        except LiveAuctioneerError:
            raise
        except Exception as e:
            raise _internal_error("Fetching avatars failed", e) from e

    @router.post("/upload-avatar-image", response_model=UploadResponse)
    async def upload_avatar_image(
        request: Request, avatar: UploadFile | None = File(None)
    ) -> UploadResponse:
        """Store an uploaded avatar image under the public avatars path."""
        if avatar is None:
            raise InvalidInput("No file uploaded")

        store = request.app.state.image_store
        try:
            store.validate(avatar.content_type, avatar.size or 0)
            data = await avatar.read()
            stored = store.ingest(
                data,
                avatar.content_type,
                declared_size=avatar.size,
                original_filename=avatar.filename or "",
            )
            return UploadResponse(filename=stored.filename, url=stored.url)
        except LiveAuctioneerError:
            raise
        except Exception as e:
            logger.error("Error uploading avatar", error=str(e))
            raise LiveAuctioneerError("Failed to upload avatar") from e

    @router.get("/auction", response_model=AuctionInfo)
    async def auction_info(request: Request) -> AuctionInfo:
        """Lot, script and the configured auctioneer for the page shell."""
        return AuctionInfo(
            lot=AuctionLot(),
            script=AuctionScript(),
            auctioneer=featured_avatar(request.app.state.settings),
        )

    @router.get("/")
    async def root(request: Request) -> dict[str, Any]:
        settings = request.app.state.settings
        return {
            "service": "Live Auctioneer",
            "version": request.app.version,
            "features": {
                "did_configured": settings.did_configured,
                "custom_avatars": True,
                "poll_interval": settings.poll_interval,
            },
            "endpoints": {
                "health": "/health",
                "auction": "/auction",
                "generate_video": "/generate-video",
                "custom_avatar_video": "/upload-custom-avatar",
                "video_status": "/check-video-status",
                "custom_video_status": "/check-custom-video-status",
                "avatars": "/get-avatars",
                "upload_avatar_image": "/upload-avatar-image",
            },
        }

    return router
