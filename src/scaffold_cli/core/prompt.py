"""Line-oriented interactive prompt."""

from __future__ import annotations

import asyncio
import sys
from typing import TextIO


class LineInterface:
    """Reads single lines from ``input`` after writing a query to ``output``."""

    def __init__(self, input: TextIO, output: TextIO):
        self.input = input
        self.output = output
        self.closed = False

    async def question(self, query: str) -> str:
        if self.closed:
            raise RuntimeError("Line interface is closed")
        self.output.write(query)
        self.output.flush()
        # readline() blocks
        line = await asyncio.to_thread(self.input.readline)
        return line.rstrip("\n").rstrip("\r")

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.output.flush()


async def ask(question: str, input: TextIO | None = None, output: TextIO | None = None) -> str:
    """Ask ``question`` and return one line of the answer.

    Defaults to stdin/stdout. Returns an empty string at end of input. There is
    no timeout; wrap the call in ``asyncio.wait_for`` if one is needed.
    """
    io = LineInterface(input or sys.stdin, output or sys.stdout)
    try:
        return await io.question(question)
    finally:
        io.close()


__all__ = ["LineInterface", "ask"]
