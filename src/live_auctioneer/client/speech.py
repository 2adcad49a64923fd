"""Local speech fallback used when no vendor video can be produced."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Protocol

import structlog

logger = structlog.get_logger()


class SpeechSynthesizer(Protocol):
    def speak(
        self,
        text: str,
        on_start: Callable[[], None],
        on_end: Callable[[], None],
        on_error: Callable[[Exception], None],
    ) -> None: ...

    def cancel(self) -> None: ...


class SimulatedSpeechSynthesizer:
    """Stands in for an on-device engine: reports start, waits the spoken length, reports end."""

    def __init__(
        self,
        words_per_minute: float = 150.0,
        rate: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.words_per_minute = words_per_minute
        self.rate = rate
        self._sleep = sleep
        self._task: asyncio.Task | None = None

    def estimate_duration(self, text: str) -> float:
        words = len(text.split())
        return words / (self.words_per_minute * self.rate) * 60.0

    def speak(self, text, on_start, on_end, on_error) -> None:
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(
            self._utter(text, on_start, on_end, on_error)
        )

    async def _utter(self, text, on_start, on_end, on_error) -> None:
        duration = self.estimate_duration(text)
        logger.info("Speaking locally", words=len(text.split()), duration=round(duration, 2))
        on_start()
        try:
            await self._sleep(duration)
        except asyncio.CancelledError:
            logger.info("Local speech cancelled")
            raise
        except Exception as e:
            logger.error("Local speech failed", error=str(e))
            on_error(e)
            return
        on_end()

    @property
    def speaking(self) -> bool:
        return self._task is not None and not self._task.done()

    async def wait(self) -> None:
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    def cancel(self) -> None:
        if self.speaking:
            self._task.cancel()
