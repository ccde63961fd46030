"""Generic async periodic service abstraction.

Provides a reusable base class for services that run one unit of work
on a fixed interval, with an explicit start/stop lifecycle.
"""
import asyncio
import signal
from abc import ABC, abstractmethod
from types import FrameType

from plantwatch.logging import get_logger


class PeriodicService(ABC):
    """Abstract base class for async periodic services.

    Implements the common loop pattern with:
    - Fixed interval between tick starts
    - Graceful shutdown handling
    - Error recovery (a failing tick never stops the loop)
    """

    def __init__(self, name: str, interval_sec: float) -> None:
        """Initialize the service.

        Args:
            name: Service name for logging.
            interval_sec: Delay between the start of two ticks, in seconds.
        """
        self.name = name
        self.interval_sec = interval_sec
        self._shutdown_requested = False
        self._stop_event: asyncio.Event | None = None
        self._logger = get_logger(f"polling.{name}")

    @property
    def shutdown_requested(self) -> bool:
        return self._shutdown_requested

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize any resources needed before the loop starts."""

    @abstractmethod
    async def cleanup(self) -> None:
        """Clean up resources when the loop exits."""

    @abstractmethod
    async def tick(self) -> None:
        """Run one unit of periodic work."""

    def on_tick_error(self, error: Exception) -> None:
        """Handle an error raised by tick().

        Override to customize error handling. Default logs the error.
        """
        self._logger.error("%s tick failed: %s", self.name, error)

    def stop(self) -> None:
        """Request the loop to stop after the current tick."""
        self._shutdown_requested = True
        if self._stop_event is not None:
            self._stop_event.set()

    def _handle_shutdown(self, signum: int, frame: FrameType | None) -> None:
        """Handle shutdown signals gracefully."""
        signal_name = signal.Signals(signum).name
        self._logger.info("Received %s, initiating graceful shutdown...", signal_name)
        self.stop()

    def _setup_signal_handlers(self) -> None:
        """Register signal handlers for graceful shutdown."""
        signal.signal(signal.SIGTERM, self._handle_shutdown)
        signal.signal(signal.SIGINT, self._handle_shutdown)

    async def _sleep(self, seconds: float) -> None:
        """Sleep until the next tick is due or stop() is called."""
        if self._stop_event is None:
            await asyncio.sleep(seconds)
            return
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
        except TimeoutError:
            pass

    async def start(self) -> None:
        """Run the loop until stop() is called."""
        self._stop_event = asyncio.Event()
        if self._shutdown_requested:
            self._stop_event.set()

        await self.initialize()
        self._logger.info("%s service started", self.name)

        loop = asyncio.get_running_loop()

        try:
            while not self._shutdown_requested:
                cycle_start = loop.time()

                try:
                    await self.tick()
                except Exception as e:
                    self.on_tick_error(e)

                # Sleep only the remaining time to maintain consistent intervals
                elapsed = loop.time() - cycle_start
                sleep_time = max(0, self.interval_sec - elapsed)
                if sleep_time > 0 and not self._shutdown_requested:
                    await self._sleep(sleep_time)
        finally:
            self._logger.info("Cleaning up resources...")
            await self.cleanup()
            self._logger.info("%s shutdown complete", self.name)

    def run(self) -> None:
        """Run the loop as the process main entry point.

        Sets up signal handlers for graceful shutdown, then runs start()
        until a SIGTERM/SIGINT is received.
        """
        self._setup_signal_handlers()
        asyncio.run(self.start())
