"""Stream provider that pipes audio out of a ``yt-dlp`` child process."""

from __future__ import annotations

import asyncio
import logging
import subprocess
from typing import IO, cast

from guild_jukebox.application.interfaces.stream_provider import AudioStream, StreamProvider
from guild_jukebox.config.settings import AudioSettings
from guild_jukebox.domain.shared.exceptions import ResolutionFailure
from guild_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from guild_jukebox.infrastructure.audio.probe import sniff_container

logger = logging.getLogger(__name__)

REAP_TIMEOUT = 5.0
STDERR_LOG_LIMIT = 500


class YtDlpProcessProvider(StreamProvider):
    """Runs the ``yt-dlp`` executable with ``-o -`` and streams its stdout.

    The child is given a short grace period to fail fast (bad URL, blocked
    video) before the first bytes are probed to detect the container. The
    process belongs to this call until it is handed over inside the returned
    ``AudioStream``; every failure path, cancellation included, kills and
    reaps it first.
    """

    name = "yt-dlp-process"

    def __init__(self, settings: AudioSettings | None = None) -> None:
        self._settings = settings or AudioSettings()

    def build_command(self, url: str) -> list[str]:
        cmd = [
            self._settings.ytdlp_path,
            url,
            "-o",
            "-",
            "-f",
            self._settings.ytdlp_format,
            "--no-playlist",
            "--quiet",
            "--no-warnings",
        ]
        if self._settings.cookie_file:
            cmd.extend(["--cookies", self._settings.cookie_file])
        return cmd

    async def attempt(self, url: str) -> AudioStream:
        try:
            proc = subprocess.Popen(
                self.build_command(url),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise ResolutionFailure(self.name, url, repr(e)) from e

        logger.debug(LogTemplates.PROCESS_SPAWNED, self._settings.ytdlp_path, proc.pid, url)

        try:
            stream = await self._probe(proc, url)
        except BaseException:
            # wait() blocks for up to REAP_TIMEOUT.
            await asyncio.to_thread(self._reap, proc)
            raise

        stream.add_closer(lambda: self._reap(proc))
        return stream

    async def _probe(self, proc: subprocess.Popen[bytes], url: str) -> AudioStream:
        await asyncio.sleep(self._settings.probe_grace_seconds)

        code = proc.poll()
        if code is not None and code != 0:
            self._log_stderr(proc)
            raise ResolutionFailure(self.name, url, ErrorMessages.PROCESS_EXITED.format(code=code))

        stdout = cast(IO[bytes], proc.stdout)
        timeout = self._settings.probe_timeout_seconds
        try:
            head = await asyncio.wait_for(
                asyncio.to_thread(stdout.peek, self._settings.probe_bytes),  # type: ignore[attr-defined]
                timeout,
            )
        except TimeoutError as e:
            raise ResolutionFailure(
                self.name, url, ErrorMessages.PROBE_TIMEOUT.format(timeout=timeout)
            ) from e

        if not head:
            self._log_stderr(proc)
            raise ResolutionFailure(self.name, url, ErrorMessages.PROCESS_NO_OUTPUT)

        container = sniff_container(head)
        logger.debug("yt-dlp output for %s detected as %s", url, container.value)
        return AudioStream(provider=self.name, location=url, container=container, pipe=stdout)

    @staticmethod
    def _log_stderr(proc: subprocess.Popen[bytes]) -> None:
        if proc.stderr is None or proc.poll() is None:
            return
        try:
            output = proc.stderr.read().decode(errors="replace").strip()
        except (OSError, ValueError):
            return
        if output:
            logger.debug(LogTemplates.PROCESS_STDERR, output[:STDERR_LOG_LIMIT])

    @staticmethod
    def _reap(proc: subprocess.Popen[bytes]) -> None:
        """Kill the process, close its pipes and wait for it to exit."""
        try:
            if proc.poll() is None:
                proc.kill()
        except OSError as e:
            logger.debug(LogTemplates.PROCESS_KILL_FAILED, proc.pid, e)

        for pipe in (proc.stdout, proc.stderr):
            if pipe is not None:
                try:
                    pipe.close()
                except (OSError, ValueError):
                    pass

        try:
            code = proc.wait(timeout=REAP_TIMEOUT)
        except subprocess.TimeoutExpired:
            logger.warning(LogTemplates.PROCESS_KILL_FAILED, proc.pid, "did not exit")
            return
        logger.debug(LogTemplates.PROCESS_REAPED, proc.pid, code)
