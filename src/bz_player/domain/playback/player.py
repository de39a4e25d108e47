"""
Audio sink: one decoded stream at a time behind a single lock.

The production backend drives an mpv process over its JSON IPC socket. mpv
runs with --keep-open=no, so it returns to idle when a file ends; "sink empty"
is mpv's idle-active property.
"""

import json
import os
import socket
import subprocess
import tempfile
import threading
import time
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Protocol

from loguru import logger

from bz_player.core.config import Config
from bz_player.domain.library.metadata import DecodedStream

# Upper bound for mpv to leave idle after loadfile (seconds)
LOAD_TIMEOUT = 2.0
LOAD_POLL_INTERVAL = 0.05


class SinkState(Enum):
    EMPTY = "empty"
    PLAYING = "playing"
    PAUSED = "paused"


class Backend(Protocol):
    """Operations an audio output must provide to the sink."""

    def load(self, path: str) -> bool: ...

    def stop(self) -> bool: ...

    def set_paused(self, paused: bool) -> bool: ...

    def is_idle(self) -> bool: ...

    def is_paused(self) -> bool: ...

    def close(self) -> None: ...


def check_mpv_available() -> bool:
    """Check if MPV is available on the system."""
    try:
        result = subprocess.run(
            ["mpv", "--version"], capture_output=True, text=True, timeout=5
        )
        return result.returncode == 0
    except (subprocess.SubprocessError, FileNotFoundError, OSError):
        return False


def _ipc_request(socket_path: Optional[str], command: dict[str, Any]) -> Optional[dict]:
    """Send one JSON IPC command and return mpv's decoded reply."""
    if not socket_path or not os.path.exists(socket_path):
        return None

    try:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(2.0)
        sock.connect(socket_path)

        command_json = json.dumps(command) + "\n"
        sock.send(command_json.encode("utf-8"))

        response = sock.recv(4096).decode("utf-8").strip()
        sock.close()
    except OSError as e:
        logger.debug(f"mpv IPC failed for {command}: {e}")
        return None

    # mpv may push event lines before the reply; the reply carries "error"
    for line in response.splitlines():
        try:
            data = json.loads(line)
        except json.JSONDecodeError:
            continue
        if "error" in data:
            return data
    return None


def send_mpv_command(socket_path: Optional[str], command: dict[str, Any]) -> bool:
    """Send JSON IPC command to MPV."""
    reply = _ipc_request(socket_path, command)
    return reply is not None and reply.get("error") == "success"


def get_mpv_property(socket_path: Optional[str], property_name: str) -> Any:
    """Get a property value from MPV."""
    reply = _ipc_request(socket_path, {"command": ["get_property", property_name]})
    if reply is not None and reply.get("error") == "success":
        return reply.get("data")
    return None


class MpvBackend:
    """mpv process controlled over JSON IPC."""

    def __init__(self, socket_path: str, process: subprocess.Popen):
        self.socket_path = socket_path
        self.process = process

    def is_running(self) -> bool:
        if self.process.poll() is not None:
            return False
        return os.path.exists(self.socket_path)

    def load(self, path: str) -> bool:
        """Replace whatever is playing with path and start playback."""
        if not send_mpv_command(
            self.socket_path, {"command": ["loadfile", path, "replace"]}
        ):
            logger.error(f"mpv refused to load {path}")
            return False

        # loadfile returns before mpv leaves idle
        deadline = time.monotonic() + LOAD_TIMEOUT
        while time.monotonic() < deadline:
            if get_mpv_property(self.socket_path, "idle-active") is False:
                break
            time.sleep(LOAD_POLL_INTERVAL)
        else:
            logger.warning(f"mpv still idle {LOAD_TIMEOUT}s after loading {path}")

        return self.set_paused(False)

    def stop(self) -> bool:
        return send_mpv_command(self.socket_path, {"command": ["stop"]})

    def set_paused(self, paused: bool) -> bool:
        return send_mpv_command(
            self.socket_path, {"command": ["set_property", "pause", paused]}
        )

    def is_idle(self) -> bool:
        if not self.is_running():
            return True
        return get_mpv_property(self.socket_path, "idle-active") is True

    def is_paused(self) -> bool:
        return get_mpv_property(self.socket_path, "pause") is True

    def close(self) -> None:
        """Stop MPV process and cleanup."""
        try:
            self.process.kill()
            self.process.wait(timeout=2.0)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning(f"MPV did not exit cleanly: {e}")

        if os.path.exists(self.socket_path):
            try:
                os.unlink(self.socket_path)
            except OSError as e:
                logger.debug(f"Could not remove socket {self.socket_path}: {e}")


def start_mpv(config: Config) -> Optional[MpvBackend]:
    """Start MPV with JSON IPC and return its backend, or None on failure."""
    if config.player.mpv_socket_path:
        socket_path = config.player.mpv_socket_path
    else:
        temp_dir = Path(tempfile.gettempdir())
        socket_path = str(temp_dir / f"bz-player-mpv-{os.getpid()}")

    logger.info(f"Starting MPV player with socket: {socket_path}")

    try:
        if os.path.exists(socket_path):
            logger.debug(f"Removing existing socket: {socket_path}")
            os.unlink(socket_path)

        cmd = [
            "mpv",
            "--idle=yes",
            "--no-video",
            "--no-terminal",
            f"--input-ipc-server={socket_path}",
            f"--volume={config.player.volume}",
            "--keep-open=no",
            "--load-scripts=no",
        ]

        process = subprocess.Popen(
            cmd,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            stdin=subprocess.DEVNULL,
        )

        # Wait for socket to be created
        timeout = 5.0
        start_time = time.time()
        while not os.path.exists(socket_path):
            if time.time() - start_time > timeout:
                logger.error(f"MPV socket creation timeout after {timeout}s")
                process.kill()
                return None
            time.sleep(0.1)

        if get_mpv_property(socket_path, "idle-active") is None:
            logger.error("MPV socket connection test failed")
            process.kill()
            return None

    except (subprocess.SubprocessError, OSError) as e:
        logger.error(f"Failed to start MPV: {e}")
        return None

    logger.info("MPV started successfully")
    return MpvBackend(socket_path, process)


class AudioSink:
    """Explicit handle to the audio output shared by the engine and watcher.

    Every operation takes the same lock, so a reload (clear, append, play) is
    never observed half-done by the completion watcher.
    """

    def __init__(self, backend: Backend):
        self._backend = backend
        self._lock = threading.Lock()

    def replace(self, stream: DecodedStream) -> bool:
        """Drop the current stream and start playing stream."""
        with self._lock:
            loaded = self._backend.load(stream.path)
        if loaded:
            logger.info(f"Playing {stream.name}")
        return loaded

    def clear(self) -> None:
        with self._lock:
            self._backend.stop()

    def play(self) -> None:
        with self._lock:
            self._backend.set_paused(False)

    def pause(self) -> None:
        with self._lock:
            self._backend.set_paused(True)

    def is_empty(self) -> bool:
        with self._lock:
            return self._backend.is_idle()

    def state(self) -> SinkState:
        with self._lock:
            if self._backend.is_idle():
                return SinkState.EMPTY
            if self._backend.is_paused():
                return SinkState.PAUSED
            return SinkState.PLAYING

    def close(self) -> None:
        with self._lock:
            self._backend.close()
