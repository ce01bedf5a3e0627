import asyncio
import logging
import time

from errors import CommandError
from errors import CommandTimeoutError


class DriverEnv:
    """Logger and optional deadline travelling with one operation."""

    def __init__(self, logger, deadline=None):
        self.logger = logger
        self.deadline = deadline

    def with_deadline(self, seconds):
        deadline = time.monotonic() + seconds
        if self.deadline is not None:
            deadline = min(deadline, self.deadline)
        return DriverEnv(self.logger, deadline)

    def remaining(self):
        if self.deadline is None:
            return None
        return max(self.deadline - time.monotonic(), 0.0)

    def session(self, name):
        return SessionAdapter(self.logger, {"session": name})


class SessionAdapter(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


class Invoker:
    async def invoke(self, env: DriverEnv, command: str, args: list) -> bytes:
        log = env.logger
        timeout = env.remaining()
        if timeout is not None and timeout <= 0:
            raise CommandTimeoutError(command, 0)

        # args can hold credentials, only the program is logged here
        log.debug(f"Run cmd: {command} ({len(args)} arguments)")
        try:
            process = await asyncio.create_subprocess_exec(
                command,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            raise CommandError(command, None, str(e).encode()) from e

        try:
            stdout, _ = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            log.warning(f"{command} timed out after {timeout:.1f}s")
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()
            raise CommandTimeoutError(command, round(timeout, 1))

        if process.returncode != 0:
            raise CommandError(command, process.returncode, stdout)
        return stdout
