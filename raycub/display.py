"""Windows, event hooks and the event loop that drives them."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from enum import IntEnum
from typing import Any

from raycub.image import BYTES_PER_PIXEL, Image

Handler = Callable[..., Any]


class Event(IntEnum):
    """Event kinds a window can hook, numbered as X11 event types."""

    KEY_PRESS = 2
    KEY_RELEASE = 3
    BUTTON_PRESS = 4
    BUTTON_RELEASE = 5
    MOTION_NOTIFY = 6
    EXPOSE = 12
    DESTROY_NOTIFY = 17


class Window:
    """A window: a framebuffer, a title, a pointer position and event hooks."""

    def __init__(self, width: int, height: int, title: str) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"invalid window size {width}x{height}")
        self.width = width
        self.height = height
        self.title = title
        self.framebuffer = Image(width, height)
        self.pointer = (0, 0)
        self.hooks: dict[Event, Handler] = {}

    def __repr__(self) -> str:
        return f"Window({self.width}, {self.height}, {self.title!r})"

    def hook(self, event: Event | int, handler: Handler) -> None:
        """Register ``handler`` for ``event``, replacing any earlier one."""
        self.hooks[Event(event)] = handler

    def dispatch(self, event: Event | int, *args: Any) -> Any:
        """Call the handler hooked to ``event`` with ``args``.

        Returns what the handler returns, or None when nothing is hooked.
        """
        handler = self.hooks.get(Event(event))
        if handler is None:
            return None
        return handler(*args)


class Display:
    """Owns the windows and runs the event loop.

    Pending events are ``(window, event, args)`` triples in ``events``.
    ``poll``, when set, is called once per loop turn to queue new events.
    """

    def __init__(self) -> None:
        self.windows: list[Window] = []
        self.events: deque[tuple[Window, Event, tuple[Any, ...]]] = deque()
        self.poll: Callable[[], None] | None = None
        self._loop_hook: Callable[[], Any] | None = None
        self._ended = False

    def new_window(self, width: int, height: int, title: str) -> Window:
        """Create a window; the newest window comes first in ``windows``."""
        window = Window(width, height, title)
        self.windows.insert(0, window)
        return window

    def destroy_window(self, window: Window) -> None:
        """Remove a window; its pending events are dropped."""
        try:
            self.windows.remove(window)
        except ValueError:
            raise ValueError(f"{window!r} does not belong to this display") from None

    def loop_hook(self, handler: Callable[[], Any] | None) -> None:
        """Set the function called after each batch of events."""
        self._loop_hook = handler

    def loop_end(self) -> None:
        """Make :meth:`loop` return after the current step."""
        self._ended = True

    def _drain(self) -> None:
        while not self._ended and self.events:
            window, event, args = self.events.popleft()
            if window in self.windows:
                window.dispatch(event, *args)

    def loop(self) -> None:
        """Dispatch events and run the loop hook while windows remain.

        Without a loop hook or a poll function the loop returns once the
        queued events are handled.
        """
        while self.windows and not self._ended:
            if self.poll is not None:
                self.poll()
            self._drain()
            if self._ended:
                break
            if self._loop_hook is not None:
                self._loop_hook()
            elif self.poll is None and not self.events:
                break

    def put_image(self, window: Window, image: Image, x: int, y: int) -> None:
        """Copy ``image`` into the window's framebuffer at (x, y), clipped."""
        target = window.framebuffer
        x0 = max(x, 0)
        x1 = min(x + image.width, target.width)
        if x0 >= x1:
            return
        count = (x1 - x0) * BYTES_PER_PIXEL
        for row in range(max(0, -y), min(image.height, target.height - y)):
            src = row * image.line_len + (x0 - x) * BYTES_PER_PIXEL
            dst = (y + row) * target.line_len + x0 * BYTES_PER_PIXEL
            target.data[dst:dst + count] = image.data[src:src + count]

    def mouse_move(self, window: Window, x: int, y: int) -> None:
        """Move the pointer to (x, y) relative to ``window``."""
        window.pointer = (x, y)