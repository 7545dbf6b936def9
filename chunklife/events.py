"""Window events, event masks and the per-window table of event hooks."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import Any

MAX_EVENT = 36


class EventType(IntEnum):
    """Core X11 event type numbers."""

    KEY_PRESS = 2
    KEY_RELEASE = 3
    BUTTON_PRESS = 4
    BUTTON_RELEASE = 5
    MOTION_NOTIFY = 6
    ENTER_NOTIFY = 7
    LEAVE_NOTIFY = 8
    FOCUS_IN = 9
    FOCUS_OUT = 10
    KEYMAP_NOTIFY = 11
    EXPOSE = 12
    GRAPHICS_EXPOSE = 13
    NO_EXPOSE = 14
    VISIBILITY_NOTIFY = 15
    CREATE_NOTIFY = 16
    DESTROY_NOTIFY = 17
    UNMAP_NOTIFY = 18
    MAP_NOTIFY = 19
    MAP_REQUEST = 20
    REPARENT_NOTIFY = 21
    CONFIGURE_NOTIFY = 22
    CONFIGURE_REQUEST = 23
    GRAVITY_NOTIFY = 24
    RESIZE_REQUEST = 25
    CIRCULATE_NOTIFY = 26
    CIRCULATE_REQUEST = 27
    PROPERTY_NOTIFY = 28
    SELECTION_CLEAR = 29
    SELECTION_REQUEST = 30
    SELECTION_NOTIFY = 31
    COLORMAP_NOTIFY = 32
    CLIENT_MESSAGE = 33
    MAPPING_NOTIFY = 34
    GENERIC_EVENT = 35


class EventMask(IntFlag):
    """Core X11 event selection masks."""

    NO_EVENT = 0
    KEY_PRESS = 1 << 0
    KEY_RELEASE = 1 << 1
    BUTTON_PRESS = 1 << 2
    BUTTON_RELEASE = 1 << 3
    ENTER_WINDOW = 1 << 4
    LEAVE_WINDOW = 1 << 5
    POINTER_MOTION = 1 << 6
    POINTER_MOTION_HINT = 1 << 7
    BUTTON1_MOTION = 1 << 8
    BUTTON2_MOTION = 1 << 9
    BUTTON3_MOTION = 1 << 10
    BUTTON4_MOTION = 1 << 11
    BUTTON5_MOTION = 1 << 12
    BUTTON_MOTION = 1 << 13
    KEYMAP_STATE = 1 << 14
    EXPOSURE = 1 << 15
    VISIBILITY_CHANGE = 1 << 16
    STRUCTURE_NOTIFY = 1 << 17
    RESIZE_REDIRECT = 1 << 18
    SUBSTRUCTURE_NOTIFY = 1 << 19
    SUBSTRUCTURE_REDIRECT = 1 << 20
    FOCUS_CHANGE = 1 << 21
    PROPERTY_CHANGE = 1 << 22
    COLORMAP_CHANGE = 1 << 23
    OWNER_GRAB_BUTTON = 1 << 24


@dataclass(frozen=True)
class Event:
    """An event delivered to a window.

    ``keysym`` is used by key events, ``button`` by button events, ``x`` and
    ``y`` by button and motion events, ``count`` by expose events.
    """

    type: int
    keysym: int = 0
    button: int = 0
    x: int = 0
    y: int = 0
    count: int = 0


@dataclass
class Hook:
    """A callback bound to one event type, with the mask it selects."""

    mask: int
    func: Callable[..., Any] | None
    param: Any = None


class HookTable:
    """The hooks installed on one window, one per event type."""

    def __init__(self) -> None:
        self._hooks: dict[int, Hook] = {}

    def __contains__(self, event_type: object) -> bool:
        return event_type in self._hooks

    def get(self, event_type: int) -> Hook | None:
        """Return the hook for ``event_type``, or None."""
        return self._hooks.get(int(event_type))

    def hook(
        self,
        event_type: int,
        mask: int,
        func: Callable[..., Any] | None,
        param: Any = None,
    ) -> None:
        """Install ``func`` for ``event_type`` and select events with ``mask``."""
        event_type = int(event_type)
        if not 0 <= event_type < MAX_EVENT:
            raise ValueError(f"event type must be in [0, {MAX_EVENT}), got {event_type}")
        self._hooks[event_type] = Hook(int(mask), func, param)

    def key_hook(self, func: Callable[..., Any] | None, param: Any = None) -> None:
        """Install a hook called on key release as func(keysym, param)."""
        self.hook(EventType.KEY_RELEASE, EventMask.KEY_RELEASE, func, param)

    def mouse_hook(self, func: Callable[..., Any] | None, param: Any = None) -> None:
        """Install a hook called on button press as func(button, x, y, param)."""
        self.hook(EventType.BUTTON_PRESS, EventMask.BUTTON_PRESS, func, param)

    def expose_hook(self, func: Callable[..., Any] | None, param: Any = None) -> None:
        """Install a hook called on the last expose event as func(param)."""
        self.hook(EventType.EXPOSE, EventMask.EXPOSURE, func, param)

    def event_mask(self) -> EventMask:
        """Return the union of the masks of every installed hook."""
        mask = 0
        for hook in self._hooks.values():
            mask |= hook.mask
        return EventMask(mask)

    def dispatch(self, event: Event) -> bool:
        """Call the hook for ``event`` with the arguments its type carries.

        Returns True when a hook was called.
        """
        event_type = int(event.type)
        if not EventType.KEY_PRESS <= event_type < MAX_EVENT:
            return False
        hook = self._hooks.get(event_type)
        if hook is None or hook.func is None:
            return False
        if event_type in (EventType.KEY_PRESS, EventType.KEY_RELEASE):
            hook.func(event.keysym, hook.param)
        elif event_type in (EventType.BUTTON_PRESS, EventType.BUTTON_RELEASE):
            hook.func(event.button, event.x, event.y, hook.param)
        elif event_type == EventType.MOTION_NOTIFY:
            hook.func(event.x, event.y, hook.param)
        elif event_type == EventType.EXPOSE:
            if event.count:
                return False
            hook.func(hook.param)
        else:
            hook.func(hook.param)
        return True