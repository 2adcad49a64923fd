"""Playback/fallback orchestration for the auctioneer: vendor video first, local speech second."""

import asyncio
import functools
from collections.abc import Awaitable, Callable

import structlog

from src.live_auctioneer.client.api import AuctionApiClient
from src.live_auctioneer.client.poller import JobPoller, PollerState
from src.live_auctioneer.client.speech import SimulatedSpeechSynthesizer, SpeechSynthesizer
from src.live_auctioneer.errors import ConfigurationError
from src.live_auctioneer.models.avatar import AvatarDescriptor
from src.live_auctioneer.models.video import GenerationMode

logger = structlog.get_logger()

PROGRESS_STEP = 0.5
PROGRESS_MAX = 100.0


class PlaybackOrchestrator:
    """Owns the play/stop toggle, the generation poll loop and the progress indicator.

    At most one generation or playback is active at a time; ``toggle()`` while
    active stops it.
    """

    def __init__(
        self,
        api: AuctionApiClient,
        avatar: AvatarDescriptor | None,
        script_text: str,
        speech: SpeechSynthesizer | None = None,
        poll_interval: float = 2.0,
        poll_max_attempts: int | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        frame_interval: float = 1 / 60,
    ) -> None:
        self.api = api
        self.avatar = avatar
        self.script_text = script_text
        self.speech = speech or SimulatedSpeechSynthesizer(sleep=sleep)
        self.poll_interval = poll_interval
        self.poll_max_attempts = poll_max_attempts
        self.frame_interval = frame_interval
        self._sleep = sleep

        self.is_playing = False
        self.is_generating = False
        self.progress = 0.0
        self.video_url = ""
        self.video_paused = False
        self.status = ""
        self.using_local_speech = False

        self._generation = 0
        self._poller: JobPoller | None = None
        self._poll_task: asyncio.Task | None = None
        self._animation_task: asyncio.Task | None = None

    @property
    def mode(self) -> GenerationMode:
        if self.avatar is not None and self.avatar.is_custom:
            return GenerationMode.custom_image
        return GenerationMode.registered_presenter

    def _set_status(self, notice: str) -> None:
        self.status = notice

    # ---- Commands ----

    async def toggle(self) -> None:
        if self.is_playing or self.is_generating:
            self.stop()
            return
        await self.start()

    async def start(self) -> None:
        text = self.script_text.strip()
        if not text:
            return
        if self.avatar is None:
            self.status = "Please select an auctioneer first"
            return

        self._generation += 1
        generation = self._generation
        self.is_generating = True
        self.video_url = ""
        self.video_paused = False
        self.using_local_speech = False
        self.status = "Auctioneer preparing..."

        try:
            job_id = await self._submit(text)
        except Exception as e:
            if generation != self._generation:
                logger.info("Submission failed after stop", error=str(e))
                return
            self.is_generating = False
            self._log_fallback(e)
            self.status = f"Error: {e}"
            self._speak_locally(text)
            return

        # a stop() while the submission was in flight supersedes this start
        if generation != self._generation:
            logger.info("Discarding job submitted before stop", job_id=job_id)
            return

        self._poller = JobPoller(
            functools.partial(self.api.check_status, mode=self.mode),
            interval=self.poll_interval,
            max_attempts=self.poll_max_attempts,
            sleep=self._sleep,
            on_notice=self._set_status,
        )
        self._poll_task = asyncio.get_running_loop().create_task(
            self._follow(self._poller, job_id)
        )

    def stop(self) -> None:
        """Cancel any pending poll, pause the video and silence local speech."""
        self._generation += 1
        if self.is_generating:
            self.is_generating = False
            self.status = "Auction stopped"
        if self._poll_task is not None and not self._poll_task.done():
            self._poll_task.cancel()
        self._poll_task = None

        self.is_playing = False
        self.progress = 0.0
        if self.video_url:
            self.video_paused = True
        self._stop_animation()
        if self.using_local_speech:
            self.speech.cancel()

    def video_ended(self) -> None:
        self.is_playing = False
        self.progress = PROGRESS_MAX

    async def wait(self) -> None:
        """Wait for the current poll loop and local speech to settle."""
        if self._poll_task is not None:
            await asyncio.gather(self._poll_task, return_exceptions=True)
        wait_speech = getattr(self.speech, "wait", None)
        if self.using_local_speech and wait_speech is not None:
            await wait_speech()
        if self._animation_task is not None:
            await asyncio.gather(self._animation_task, return_exceptions=True)

    # ---- Vendor path ----

    async def _submit(self, text: str) -> str:
        avatar = self.avatar
        if avatar.is_custom:
            return await self.api.generate_custom_avatar_video(
                text,
                image_url=avatar.image,
                voice_id=avatar.voice_id,
                gender=avatar.gender,
                has_custom_voice=avatar.has_custom_voice,
            )
        return await self.api.generate_video(
            text,
            avatar_image=avatar.id,
            voice_id=avatar.voice_id,
            gender=avatar.gender,
        )

    async def _follow(self, poller: JobPoller, job_id: str) -> None:
        outcome = await poller.run(job_id)
        self.is_generating = False
        if outcome.state == PollerState.completed:
            self.video_url = outcome.result_url
            self.is_playing = True

    # ---- Local speech path ----

    @staticmethod
    def _log_fallback(error: Exception) -> None:
        if isinstance(error, ConfigurationError):
            logger.info("D-ID not configured, using local speech", error=str(error))
        else:
            logger.warning(
                "D-ID video generation failed, falling back to local speech", error=str(error)
            )

    def _speak_locally(self, text: str) -> None:
        self.using_local_speech = True
        self.speech.speak(
            text,
            on_start=self._on_speech_start,
            on_end=self._on_speech_end,
            on_error=self._on_speech_error,
        )

    def _on_speech_start(self) -> None:
        self.is_playing = True
        self._stop_animation()
        self._animation_task = asyncio.get_running_loop().create_task(self._animate())

    def _on_speech_end(self) -> None:
        self.is_playing = False
        self.progress = 0.0
        self._stop_animation()

    def _on_speech_error(self, _error: Exception) -> None:
        self.is_playing = False
        self.progress = 0.0
        self._stop_animation()

    async def _animate(self) -> None:
        # progress is driven by a fixed frame rate, not by the audio clock
        while self.is_playing:
            if self.progress >= PROGRESS_MAX:
                self.is_playing = False
                self.progress = 0.0
                return
            self.progress += PROGRESS_STEP
            await self._sleep(self.frame_interval)

    def _stop_animation(self) -> None:
        task = self._animation_task
        self._animation_task = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
