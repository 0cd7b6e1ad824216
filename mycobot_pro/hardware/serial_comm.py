"""
Serial transport for the myCobot
Duplex byte stream with a reader thread pushing inbound bytes to a callback
"""

import serial
import threading
import logging
from typing import Callable, Optional

from ..config import SERIAL_DEFAULTS
from ..exceptions import CobotConnectionError

logger = logging.getLogger(__name__)

DataCallback = Callable[[bytes], None]
ClosedCallback = Callable[[Optional[Exception]], None]


class Transport:
    """
    Byte-stream interface the dispatcher talks to

    Implementations deliver inbound bytes through ``on_data`` and report an
    unexpected loss of the link through ``on_closed(exc)``. ``on_closed`` is
    not called for a regular ``close()``.
    """

    on_data: Optional[DataCallback] = None
    on_closed: Optional[ClosedCallback] = None

    @property
    def is_open(self) -> bool:
        raise NotImplementedError

    def open(self):
        raise NotImplementedError

    def close(self):
        raise NotImplementedError

    def write(self, data: bytes):
        raise NotImplementedError


class SerialTransport(Transport):
    """pyserial-backed transport"""

    def __init__(self, port: str, baudrate: int = SERIAL_DEFAULTS["baudrate"],
                 read_timeout: float = SERIAL_DEFAULTS["read_timeout"],
                 write_timeout: float = SERIAL_DEFAULTS["write_timeout"]):
        self.port = port
        self.baudrate = baudrate
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout

        self._serial: Optional[serial.Serial] = None
        self._reader_thread: Optional[threading.Thread] = None
        self._running = False

    @property
    def is_open(self) -> bool:
        return bool(self._serial and self._serial.is_open)

    def open(self):
        """Open the port and start the reader thread"""
        if self.is_open:
            return

        try:
            self._serial = serial.Serial(
                port=self.port,
                baudrate=self.baudrate,
                timeout=self.read_timeout,
                write_timeout=self.write_timeout,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                rtscts=False
            )
            self._serial.reset_input_buffer()
            self._serial.reset_output_buffer()
        except (serial.SerialException, ValueError) as e:
            self._serial = None
            raise CobotConnectionError(f"Failed to open port {self.port}: {e}") from e

        self._running = True
        self._reader_thread = threading.Thread(
            target=self._reader_loop,
            name=f"mycobot-reader-{self.port}",
            daemon=True
        )
        self._reader_thread.start()
        logger.info(f"✅ Opened {self.port} @ {self.baudrate} baud")

    def close(self):
        """Stop the reader thread and close the port"""
        self._running = False
        if self._reader_thread and self._reader_thread is not threading.current_thread():
            self._reader_thread.join(timeout=1.0)
        self._reader_thread = None

        if self._serial is not None:
            try:
                self._serial.close()
            except serial.SerialException as e:
                raise CobotConnectionError(f"Failed to close port {self.port}: {e}") from e
            finally:
                self._serial = None
            logger.info("🔌 Serial connection closed")

    def write(self, data: bytes):
        if not self.is_open:
            raise CobotConnectionError("Serial port is not open")
        try:
            self._serial.write(data)
            self._serial.flush()
        except (serial.SerialException, OSError) as e:
            raise CobotConnectionError(f"Serial write failed: {e}") from e

    def _reader_loop(self):
        """Reader Thread Loop - reads continuously from the port"""
        port = self._serial
        while self._running:
            try:
                data = port.read(port.in_waiting or 1)
            except (serial.SerialException, OSError) as e:
                if not self._running:
                    break
                logger.error(f"Serial read error: {e}")
                self._running = False
                if self.on_closed:
                    self.on_closed(e)
                break

            if data and self.on_data:
                self.on_data(data)
