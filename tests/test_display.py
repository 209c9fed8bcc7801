import pytest

from raycub.display import Display, Event, Window
from raycub.image import Image


def test_new_window_is_listed_first():
    display = Display()
    first = display.new_window(300, 300, "win1")
    second = display.new_window(600, 600, "win2")
    assert display.windows == [second, first]
    assert (second.width, second.height, second.title) == (600, 600, "win2")


def test_window_rejects_bad_size():
    with pytest.raises(ValueError):
        Window(0, 10, "bad")


def test_dispatch_calls_hooked_handler():
    window = Window(10, 10, "w")
    window.hook(Event.KEY_PRESS, lambda key: key * 2)
    assert window.dispatch(Event.KEY_PRESS, 21) == 42
    assert window.dispatch(Event.KEY_RELEASE, 21) is None


def test_hook_replaces_previous_handler():
    window = Window(10, 10, "w")
    window.hook(Event.EXPOSE, lambda: "old")
    window.hook(12, lambda: "new")
    assert window.dispatch(Event.EXPOSE) == "new"


def test_mouse_hook_recreates_window():
    display = Display()
    state = {}

    def on_mouse(button, x, y):
        display.destroy_window(state["win1"])
        state["win1"] = display.new_window(200, 100, "new win")
        state["win1"].hook(Event.BUTTON_PRESS, on_mouse)

    state["win1"] = display.new_window(300, 300, "win1")
    win2 = display.new_window(600, 600, "win2")
    original = state["win1"]
    original.hook(Event.BUTTON_PRESS, on_mouse)
    win2.hook(Event.BUTTON_PRESS, on_mouse)
    display.events.append((original, Event.BUTTON_PRESS, (1, 5, 5)))
    display.loop()
    assert original not in display.windows
    assert len(display.windows) == 2
    assert display.windows[0].title == "new win"


def test_loop_end_stops_loop():
    display = Display()
    window = display.new_window(10, 10, "w")
    calls = []

    def tick():
        calls.append(1)
        if len(calls) == 3:
            display.loop_end()

    display.loop_hook(tick)
    display.loop()
    assert len(calls) == 3
    assert display.windows == [window]


def test_loop_without_windows_does_not_call_hook():
    display = Display()
    calls = []
    display.loop_hook(lambda: calls.append(1))
    display.loop()
    assert calls == []


def test_events_dispatched_before_loop_hook_in_order():
    display = Display()
    window = display.new_window(10, 10, "w")
    seen = []
    window.hook(Event.KEY_PRESS, lambda key: seen.append(("press", key)))
    window.hook(Event.KEY_RELEASE, lambda key: seen.append(("release", key)))

    def tick():
        seen.append("tick")
        display.loop_end()

    display.loop_hook(tick)
    display.events.append((window, Event.KEY_PRESS, (119,)))
    display.events.append((window, Event.KEY_RELEASE, (119,)))
    display.loop()
    assert seen == [("press", 119), ("release", 119), "tick"]


def test_events_of_destroyed_window_are_ignored():
    display = Display()
    keep = display.new_window(10, 10, "keep")
    gone = display.new_window(10, 10, "gone")
    seen = []
    gone.hook(Event.KEY_PRESS, lambda key: seen.append(key))
    display.destroy_window(gone)
    display.events.append((gone, Event.KEY_PRESS, (1,)))
    display.loop()
    assert seen == []
    assert display.windows == [keep]


def test_destroying_unknown_window_raises():
    display = Display()
    with pytest.raises(ValueError):
        display.destroy_window(Window(5, 5, "stray"))


def test_poll_feeds_events():
    display = Display()
    window = display.new_window(10, 10, "w")
    seen = []
    window.hook(Event.MOTION_NOTIFY, lambda x, y: seen.append((x, y)))
    window.hook(Event.DESTROY_NOTIFY, display.loop_end)
    feed = iter([
        [(window, Event.MOTION_NOTIFY, (3, 4))],
        [(window, Event.DESTROY_NOTIFY, ())],
    ])
    display.poll = lambda: display.events.extend(next(feed))
    display.loop()
    assert seen == [(3, 4)]


def test_put_image_copies_with_offset():
    display = Display()
    window = display.new_window(4, 4, "w")
    image = Image(2, 2)
    image.fill(0x123456)
    display.put_image(window, image, 1, 2)
    fb = window.framebuffer
    assert fb.get_pixel(1, 2) == 0x123456
    assert fb.get_pixel(2, 3) == 0x123456
    assert fb.get_pixel(0, 2) == 0
    assert fb.get_pixel(1, 1) == 0


def test_put_image_clips_outside():
    display = Display()
    window = display.new_window(3, 3, "w")
    image = Image(2, 2)
    image.fill(0xABCDEF)
    display.put_image(window, image, -1, 2)
    fb = window.framebuffer
    assert fb.get_pixel(0, 2) == 0xABCDEF
    assert fb.get_pixel(1, 2) == 0
    assert fb.get_pixel(0, 1) == 0


def test_mouse_move_sets_pointer():
    display = Display()
    window = display.new_window(100, 100, "w")
    display.mouse_move(window, 50, 40)
    assert window.pointer == (50, 40)