"""Run the email skill script as a child process.

The script is always started from an argument vector; no shell ever parses
user text. Every call resolves to exactly one `InvocationResult`: a missing
script, a spawn failure, a non-zero exit and a timeout are all reported
through the result instead of being raised.
"""

from __future__ import annotations

import contextlib
import subprocess
from collections.abc import Sequence
from pathlib import Path

import anyio
from anyio.abc import ByteReceiveStream

from .config import EmailBridgeConfig
from .logging import get_logger
from .sanitize import sanitize
from .types import InvocationResult, SanitizedArgument

logger = get_logger(__name__)

SCRIPT_RELATIVE_PATH = Path("scripts") / "clawdbot_extension.py"
VERBOSE_FLAG = "--verbose"


def _as_argument(value: object) -> SanitizedArgument:
    if isinstance(value, SanitizedArgument):
        return value
    return sanitize(value)


async def _drain(stream: ByteReceiveStream | None, sink: list[bytes]) -> None:
    if stream is None:
        return
    async for chunk in stream:
        sink.append(chunk)


def _decode(chunks: list[bytes]) -> str:
    return b"".join(chunks).decode("utf-8", errors="replace")


class ProcessInvoker:
    def __init__(
        self,
        script_base_dir: Path,
        *,
        executable: str = "python3",
        default_timeout_ms: int = 30_000,
        verbose: bool = False,
    ) -> None:
        self._script_path = Path(script_base_dir) / SCRIPT_RELATIVE_PATH
        self._executable = executable
        self._default_timeout_ms = default_timeout_ms
        self._verbose = verbose

    @classmethod
    def from_config(cls, config: EmailBridgeConfig) -> ProcessInvoker:
        return cls(
            config.script_base_dir,
            executable=config.executable,
            default_timeout_ms=config.default_timeout_ms,
            verbose=config.verbose,
        )

    @property
    def script_path(self) -> Path:
        return self._script_path

    def build_argv(self, command: object, args: Sequence[object] = ()) -> list[str]:
        argv = [
            self._executable,
            str(self._script_path),
            _as_argument(command),
            *(_as_argument(arg) for arg in args),
        ]
        if self._verbose:
            argv.append(VERBOSE_FLAG)
        return argv

    async def invoke(
        self,
        command: object,
        args: Sequence[object] = (),
        *,
        timeout_ms: int | None = None,
    ) -> InvocationResult:
        if not self._script_path.exists():
            logger.error("email.invoke.script_missing", script=str(self._script_path))
            return InvocationResult(
                exit_code=None,
                stdout="",
                stderr="",
                spawn_error=f"script not found: {self._script_path}",
            )

        argv = self.build_argv(command, args)
        if timeout_ms is None:
            timeout_ms = self._default_timeout_ms
        timeout_s = timeout_ms / 1000
        # argv[2] is the sanitized keyword; the rest may carry message bodies.
        log = logger.bind(command=argv[2], argc=len(argv) - 3)
        log.debug("email.invoke.start", timeout_s=timeout_s)
        started = anyio.current_time()

        try:
            process = await anyio.open_process(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except (OSError, ValueError) as exc:
            log.warning("email.invoke.spawn_failed", error=str(exc))
            return InvocationResult(
                exit_code=None,
                stdout="",
                stderr="",
                spawn_error=f"execution failed: {exc}",
            )

        stdout_chunks: list[bytes] = []
        stderr_chunks: list[bytes] = []
        exit_code: int | None = None
        try:
            with anyio.move_on_after(timeout_s) as scope:
                async with anyio.create_task_group() as tg:
                    tg.start_soon(_drain, process.stdout, stdout_chunks)
                    tg.start_soon(_drain, process.stderr, stderr_chunks)
                exit_code = await process.wait()
        finally:
            with anyio.CancelScope(shield=True):
                if process.returncode is None:
                    with contextlib.suppress(ProcessLookupError):
                        process.kill()
                    await process.wait()
                await process.aclose()

        elapsed = round(anyio.current_time() - started, 3)
        if scope.cancelled_caught:
            log.warning("email.invoke.timeout", timeout_s=timeout_s, pid=process.pid)
            return InvocationResult(
                exit_code=process.returncode,
                stdout=_decode(stdout_chunks),
                stderr=_decode(stderr_chunks),
                timed_out=True,
            )

        log.info("email.invoke.finished", exit_code=exit_code, elapsed_s=elapsed)
        return InvocationResult(
            exit_code=exit_code,
            stdout=_decode(stdout_chunks),
            stderr=_decode(stderr_chunks),
        )
