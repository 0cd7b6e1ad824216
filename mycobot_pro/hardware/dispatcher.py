"""
Command dispatcher
Owns the connection, serializes writes and matches responses to callers
"""

import queue
import threading
import logging
from concurrent.futures import Future, InvalidStateError, TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from ..config import COMMAND_IDS, COMMAND_TIMEOUTS, DEFAULT_COMMAND_TIMEOUT, SERIAL_DEFAULTS
from ..exceptions import CobotConnectionError, ProtocolTimeoutError
from ..utils.clock import Clock, SYSTEM_CLOCK
from .commands import Command
from .framing import FrameBuffer
from .protocol import Frame, Decoded, encode_frame, decode_response, command_name
from .serial_comm import Transport

logger = logging.getLogger(__name__)

# Upper bound for the writer thread to pick up a queued frame
_WRITE_WAIT = 5.0
# Real-time slice between deadline checks against the injected clock
_WAIT_SLICE = 0.01
_STOP = object()


class ConnectionState(Enum):
    """Connection lifecycle"""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


@dataclass(eq=False)
class PendingCommand:
    """A caller waiting for the response to ``command_id``"""
    command_id: int
    deadline: float
    future: Future = field(default_factory=Future)

    def resolve(self, frame: Frame) -> bool:
        """Complete with a frame; False if already completed"""
        try:
            self.future.set_result(frame)
        except InvalidStateError:
            return False
        return True

    def fail(self, error: Exception) -> bool:
        try:
            self.future.set_exception(error)
        except InvalidStateError:
            return False
        return True


class CommandDispatcher:
    """
    Single owner of the transport

    Outgoing frames go through a send queue drained by one writer thread, so
    concurrent callers never interleave bytes. Responses carry no sequence
    number: an incoming frame resolves the earliest registered pending
    command with the same id (FIFO per id).
    """

    def __init__(self, transport: Transport,
                 clock: Clock = SYSTEM_CLOCK,
                 timeouts: Optional[Dict[str, float]] = None,
                 default_timeout: float = DEFAULT_COMMAND_TIMEOUT,
                 settle_time: float = SERIAL_DEFAULTS["settle_time"]):
        self.transport = transport
        self.clock = clock
        self.default_timeout = default_timeout
        self.settle_time = settle_time

        table = dict(COMMAND_TIMEOUTS)
        table.update(timeouts or {})
        self._timeouts = {COMMAND_IDS[name]: value for name, value in table.items()}

        self._frames = FrameBuffer()
        self._pending: List[PendingCommand] = []
        self._pending_lock = threading.Lock()

        self._send_queue: "queue.Queue" = queue.Queue()
        self._writer_thread: Optional[threading.Thread] = None

        self._state = ConnectionState.DISCONNECTED
        self._state_lock = threading.Lock()

        transport.on_data = self._on_data
        transport.on_closed = self._on_transport_closed

    # ==================== Connection Management ====================

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def connected(self) -> bool:
        return self._state == ConnectionState.CONNECTED

    def connect(self):
        """Open the transport; no-op when already connected"""
        with self._state_lock:
            if self._state != ConnectionState.DISCONNECTED:
                return
            self._state = ConnectionState.CONNECTING

        try:
            self.transport.open()
        except CobotConnectionError:
            self._state = ConnectionState.DISCONNECTED
            raise

        self._frames.clear()
        if self._writer_thread is not None:
            # Left over from a lost connection; its stop marker is already queued
            self._writer_thread.join(timeout=1.0)
        self._drain_send_queue()
        self._start_writer()

        # Wait for the board to come out of reset
        self.clock.sleep(self.settle_time)

        with self._state_lock:
            if self._state == ConnectionState.CONNECTING:
                self._state = ConnectionState.CONNECTED
        logger.info("✅ Dispatcher connected")

    def disconnect(self):
        """Close the transport and fail every waiting caller"""
        with self._state_lock:
            if self._state == ConnectionState.DISCONNECTED:
                return
            self._state = ConnectionState.DISCONNECTED

        self._stop_writer()
        try:
            self.transport.close()
        finally:
            self._fail_all(CobotConnectionError("Connection closed"))
        logger.info("🔌 Dispatcher disconnected")

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.disconnect()

    # ==================== Sending ====================

    def timeout_for(self, command_id: int) -> float:
        """Response timeout of the command's family"""
        return self._timeouts.get(command_id, self.default_timeout)

    def send_command(self, command: Command) -> Optional[Decoded]:
        return self.send(command.command_id, command.payload, command.expect_response)

    def send(self, command_id: int, payload: bytes = b"",
             expect_response: bool = False) -> Optional[Decoded]:
        """
        Write one frame and optionally wait for the matching response

        Returns the decoded response, or None when no response is expected.
        Raises CobotConnectionError when not connected or the write fails,
        ProtocolTimeoutError when no response arrives in time.
        """
        if not self.connected:
            raise CobotConnectionError("Not connected to myCobot. Call connect() first.")

        data = encode_frame(command_id, payload)

        pending = None
        timeout = self.timeout_for(command_id)
        if expect_response:
            # Register before writing so a fast reply cannot slip past
            pending = PendingCommand(command_id, self.clock.monotonic() + timeout)
            with self._pending_lock:
                self._pending.append(pending)

        written = Future()
        self._send_queue.put((data, written))
        try:
            written.result(timeout=_WRITE_WAIT)
        except FutureTimeoutError:
            self._discard(pending)
            raise CobotConnectionError("Writer did not issue the frame") from None
        except Exception:
            self._discard(pending)
            raise

        logger.debug(f"→ {command_name(command_id)} {data.hex(' ')}")

        if pending is None:
            return None

        frame = self._wait_response(pending, timeout)

        return decode_response(frame.command_id, frame.payload)

    def _wait_response(self, pending: PendingCommand, timeout: float) -> Frame:
        """Block until the response arrives or the clock passes the deadline"""
        while True:
            remaining = pending.deadline - self.clock.monotonic()
            if remaining <= 0:
                break
            try:
                return pending.future.result(timeout=min(_WAIT_SLICE, remaining))
            except FutureTimeoutError:
                continue

        if self._discard(pending):
            logger.warning(f"Response timeout for {command_name(pending.command_id)}")
            raise ProtocolTimeoutError(pending.command_id, timeout)
        # Resolved between the deadline check and the removal
        return pending.future.result()

    @property
    def pending_count(self) -> int:
        with self._pending_lock:
            return len(self._pending)

    @property
    def dropped_frames(self) -> int:
        """Frames discarded for a bad footer"""
        return self._frames.dropped_frames

    # ==================== Receiving ====================

    def _on_data(self, chunk: bytes):
        for frame in self._frames.feed(chunk):
            self._resolve(frame)

    def _resolve(self, frame: Frame):
        with self._pending_lock:
            match = next((p for p in self._pending if p.command_id == frame.command_id), None)
            if match is not None:
                self._pending.remove(match)

        if match is None:
            logger.debug(f"Ignoring unmatched response {command_name(frame.command_id)}")
            return

        logger.debug(f"← {command_name(frame.command_id)} {frame.payload.hex(' ')}")
        match.resolve(frame)

    def _discard(self, pending: Optional[PendingCommand]) -> bool:
        """Remove an entry; True if this call removed it"""
        if pending is None:
            return False
        with self._pending_lock:
            try:
                self._pending.remove(pending)
            except ValueError:
                return False
        return True

    def _fail_all(self, error: Exception):
        with self._pending_lock:
            pending, self._pending = self._pending, []
        for entry in pending:
            entry.fail(error)

    def _on_transport_closed(self, error: Optional[Exception]):
        """Transport lost underneath us"""
        logger.error(f"Connection lost: {error}")
        with self._state_lock:
            self._state = ConnectionState.DISCONNECTED
        self._send_queue.put(_STOP)
        self._fail_all(CobotConnectionError(f"Connection lost: {error}"))
        try:
            self.transport.close()
        except CobotConnectionError as e:
            logger.debug(f"Close after connection loss failed: {e}")

    # ==================== Writer ====================

    def _start_writer(self):
        self._writer_thread = threading.Thread(
            target=self._writer_loop,
            name="mycobot-writer",
            daemon=True
        )
        self._writer_thread.start()

    def _stop_writer(self):
        self._send_queue.put(_STOP)
        if self._writer_thread and self._writer_thread is not threading.current_thread():
            self._writer_thread.join(timeout=1.0)
        self._writer_thread = None
        self._drain_send_queue()

    def _drain_send_queue(self):
        """Fail frames that will never be written"""
        while True:
            try:
                item = self._send_queue.get_nowait()
            except queue.Empty:
                break
            if item is not _STOP:
                item[1].set_exception(CobotConnectionError("Connection closed"))

    def _writer_loop(self):
        while True:
            item = self._send_queue.get()
            if item is _STOP:
                break
            data, written = item
            try:
                self.transport.write(data)
            except CobotConnectionError as e:
                written.set_exception(e)
            except Exception as e:
                logger.error(f"Transport write failed: {e!r}")
                error = CobotConnectionError(f"Transport write failed: {e}")
                error.__cause__ = e
                written.set_exception(error)
            else:
                written.set_result(None)
