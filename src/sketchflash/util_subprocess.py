from __future__ import annotations

import asyncio
import codecs
import logging
import pathlib
import time
from collections.abc import Callable

from .util_baseclasses import SpawnException

logger = logging.getLogger(__file__)

CHUNK_SIZE = 4096

ChunkCallback = Callable[[str], None]


async def _drain(stream: asyncio.StreamReader, callback: ChunkCallback) -> None:
    """
    Forward every chunk as soon as it arrives.
    A multibyte character split over two chunks is decoded correctly.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while True:
        data = await stream.read(CHUNK_SIZE)
        final = data == b""
        text = decoder.decode(data, final=final)
        if text != "":
            callback(text)
        if final:
            return


async def subprocess_stream(
    args: list[str],
    cwd: pathlib.Path,
    on_stdout: ChunkCallback,
    on_stderr: ChunkCallback,
) -> int:
    """
    Async wrapper around 'asyncio.create_subprocess_exec()'.

    stdout and stderr are drained concurrently.
    Returns the returncode after both streams have been closed and the process exited.

    If the calling task is cancelled, the process is killed before
    'CancelledError' is propagated.
    """
    assert isinstance(args, list)
    assert isinstance(cwd, pathlib.Path)
    for arg in args:
        assert isinstance(arg, str), repr(arg)

    args_text = " ".join(args)
    logger.info(f"EXEC {args_text}")
    logger.debug(f"EXEC     cwd={cwd}")

    begin_s = time.monotonic()
    try:
        proc = await asyncio.create_subprocess_exec(
            *args,
            cwd=str(cwd),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        # Also covers ENOEXEC and a missing cwd
        logger.warning(f"EXEC {e!r}")
        raise SpawnException(f"Failed to spawn '{args[0]}': {e}") from e

    assert proc.stdout is not None
    assert proc.stderr is not None
    try:
        await asyncio.gather(
            _drain(proc.stdout, on_stdout),
            _drain(proc.stderr, on_stderr),
        )
        returncode = await proc.wait()
    except asyncio.CancelledError:
        logger.warning(f"EXEC cancelled, killing pid={proc.pid}: {args_text}")
        if proc.returncode is None:
            proc.kill()
        await proc.wait()
        raise

    logger.debug(f"EXEC {args_text}")
    logger.debug(f"  returncode: {returncode}")
    logger.debug(f"  duration: {time.monotonic() - begin_s:0.3f}s")
    return returncode
