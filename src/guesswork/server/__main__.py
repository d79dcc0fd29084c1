"""Guesswork JSON-lines server entry point.

Usage: python -m guesswork.server

One request per stdin line, one response per stdout line. Notifications
(``levelComplete``) are interleaved on stdout as levels finish; logging
stays on stderr.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Optional

from guesswork.config.settings import Settings, configure_logging

from .handler import ServerHandler
from .protocol import Request, Response

logger = logging.getLogger("guesswork.server")


async def handle_line(handler: ServerHandler, line: str) -> Optional[str]:
    """Answer one raw protocol line; blank lines get no reply."""
    line = line.strip()
    if not line:
        return None

    try:
        req = Request.from_json_line(line)
    except ValueError as e:
        logger.warning("rejected line: %s", e)
        return Response.failure(0, e).to_json_line()

    try:
        result = await handler.dispatch({"method": req.method, "params": req.params})
    except Exception as e:
        logger.warning("%s #%s failed: %s", req.method, req.id, e)
        return Response.failure(req.id, e).to_json_line()
    return Response(id=req.id, result=result).to_json_line()


def _write(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


async def main() -> None:
    settings = Settings.load()
    configure_logging(settings.log_level)

    handler = ServerHandler(
        settings=settings,
        write_notification=lambda n: _write(n.to_json_line()),
    )

    reader = asyncio.StreamReader()
    await asyncio.get_running_loop().connect_read_pipe(
        lambda: asyncio.StreamReaderProtocol(reader), sys.stdin,
    )
    logger.info("serving on stdio, profile at %s", settings.db_path)

    while True:
        raw = await reader.readline()
        if not raw:
            break  # stdin closed
        reply = await handle_line(handler, raw.decode("utf-8", errors="replace"))
        if reply is not None:
            _write(reply)


if __name__ == "__main__":
    asyncio.run(main())
