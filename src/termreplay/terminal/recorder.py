# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Live frame capture for an active session.

A :class:`FrameRecorder` sits next to a :class:`TerminalEmulator` and turns
the keystrokes and output of a live session into timestamped frames, so a
viewer that reconnects can fetch everything after the last frame it saw.
"""

from __future__ import annotations

import codecs
import re
import time
from collections.abc import Callable
from typing import Literal, Protocol

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from termreplay.logging import get_logger
from termreplay.terminal.emulator import TerminalEmulator
from termreplay.terminal.sequences import plain_text

logger = get_logger(__name__)

LiveFrameType = Literal["input", "output", "prompt"]

_LINE_END_RE = re.compile(r"\r\n?|\n")
_ERASE_CHARS = frozenset("\x08\x7f")
_EDITING_RE = re.compile(r"\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)?|(?:\x1b\[|\x9b)[0-?]*[\x20-/]*[@-~]|\x1b.?")


class FramePolicy(Protocol):
    """Prompt and noise rules; ``SegmentationPolicy`` satisfies this."""

    def is_prompt(self, text: str) -> bool: ...

    def is_noise(self, text: str) -> bool: ...


class LiveFrame(BaseModel):
    """One captured moment of a live session."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    timestamp: int
    type: LiveFrameType
    content: str
    cursor_x: int = 0
    cursor_y: int = 0


def edited_line(raw: str) -> str:
    """Apply backspace/DEL editing to typed input and drop escape sequences."""
    chars: list[str] = []
    for char in _EDITING_RE.sub("", raw):
        if char in _ERASE_CHARS:
            if chars:
                chars.pop()
        else:
            chars.append(char)
    return plain_text("".join(chars)).strip()


class FrameRecorder:
    """Records input, output and prompt frames while feeding the emulator.

    Input is buffered until the user presses Enter; each non-empty line becomes
    an ``input`` frame. Each output chunk updates the screen and may produce an
    ``output`` frame (skipped when it is noise or repeats the previous output)
    and a ``prompt`` frame (only when the prompt on the cursor row changed).
    Timestamps are milliseconds since recording started and never decrease.
    """

    def __init__(
        self,
        emulator: TerminalEmulator,
        policy: FramePolicy,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.emulator = emulator
        self.policy = policy
        self._clock = clock
        self._started = clock()
        self._frames: list[LiveFrame] = []
        self._input_buffer = ""
        self._last_output: str | None = None
        self._last_prompt: str | None = None
        self._last_timestamp = 0
        self._input_decoder = codecs.getincrementaldecoder(emulator.encoding)(errors="replace")
        self._output_decoder = codecs.getincrementaldecoder(emulator.encoding)(errors="replace")

    # Capture

    def record_input(self, data: str | bytes) -> list[LiveFrame]:
        """Buffer keystrokes; return the input frames completed by this chunk."""
        text = self._input_decoder.decode(data) if isinstance(data, bytes) else data
        self._input_buffer += text
        frames: list[LiveFrame] = []
        while match := _LINE_END_RE.search(self._input_buffer):
            line = self._input_buffer[: match.start()]
            self._input_buffer = self._input_buffer[match.end() :]
            command = edited_line(line)
            if command:
                frames.append(self._capture("input", command))
        return frames

    def record_output(self, data: str | bytes) -> list[LiveFrame]:
        """Feed output to the emulator; return the frames it produced."""
        text = self._output_decoder.decode(data) if isinstance(data, bytes) else data
        self.emulator.process(text)

        frames: list[LiveFrame] = []
        prompt = self.prompt_line()
        body = self._output_body(text, prompt)
        if body and body != self._last_output and not self.policy.is_noise(body):
            self._last_output = body
            frames.append(self._capture("output", body))
        if prompt and prompt != self._last_prompt:
            self._last_prompt = prompt
            frames.append(self._capture("prompt", prompt))
        return frames

    def _output_body(self, text: str, prompt: str | None) -> str:
        lines = [line.rstrip() for line in plain_text(text).split("\n")]
        while lines and not lines[-1].strip():
            lines.pop()
        if prompt and lines and lines[-1].strip() == prompt:
            lines.pop()
        return "\n".join(lines).strip("\n")

    def _capture(self, frame_type: LiveFrameType, content: str) -> LiveFrame:
        elapsed = round((self._clock() - self._started) * 1000)
        self._last_timestamp = max(self._last_timestamp, elapsed)
        cursor = self.emulator.screen.cursor
        frame = LiveFrame(
            timestamp=self._last_timestamp,
            type=frame_type,
            content=content,
            cursor_x=cursor.x,
            cursor_y=cursor.y,
        )
        self._frames.append(frame)
        logger.debug("frame_recorded", type=frame_type, timestamp=frame.timestamp)
        return frame

    # Screen views

    def prompt_line(self) -> str | None:
        """Text of the cursor row when it is a prompt, else None."""
        screen = self.emulator.screen
        line = screen.lines[screen.cursor.y].text.strip()
        if line and self.policy.is_prompt(line):
            return line
        return None

    def visible_content(self) -> str:
        """Non-blank screen rows, right-trimmed and joined with newlines."""
        rows = (line.text.rstrip() for line in self.emulator.screen.lines)
        return "\n".join(row for row in rows if row)

    # Queries

    def get_frames(self) -> tuple[LiveFrame, ...]:
        return tuple(self._frames)

    def get_frames_since(self, timestamp: int) -> tuple[LiveFrame, ...]:
        """Frames recorded strictly after ``timestamp`` (ms)."""
        return tuple(frame for frame in self._frames if frame.timestamp > timestamp)

    @property
    def latest_frame(self) -> LiveFrame | None:
        return self._frames[-1] if self._frames else None

    def reset(self) -> None:
        """Forget all frames and buffered input and clear the screen."""
        self._frames.clear()
        self._input_buffer = ""
        self._last_output = None
        self._last_prompt = None
        self._input_decoder.reset()
        self._output_decoder.reset()
        self.emulator.reset()
