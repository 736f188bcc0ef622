"""Menu widgets: shaded buttons, text buttons and a single-line text input."""

from __future__ import annotations

import time
from collections.abc import Callable, Collection
from enum import IntEnum
from typing import Optional

from .tiles import Color

WHITE = Color(255, 255, 255, 255)
BRIGHT_SHADOW_COLOR = Color(200, 200, 200, 200)
DARK_SHADOW_COLOR = Color(50, 50, 50, 140)
TEXT_SHADOW_COLOR = Color(0, 0, 0, 170)
LABEL_COLOR = Color(255, 255, 255, 200)

KEY_REPEAT_DELAY = 0.5
CURSOR_BLINK_INTERVAL = 0.2

# Keys the text input reacts to, in the order they are checked.
TYPING_KEYS: tuple[str, ...] = (
    tuple("abcdefghijklmnopqrstuvwxyz")
    + tuple("0123456789")
    + (" ", ".", ",", ";", "'", "/", "\\", "[", "]")
)

_SHIFTED = {
    "1": "!", "2": "@", "3": "#", "4": "$", "5": "%",
    "6": "^", "7": "&", "8": "*", "9": "(", "0": ")",
    "-": "_", "=": "+", "[": "{", "]": "}", "\\": "|",
    ";": ":", "'": '"', ",": "<", ".": ">", "/": "?",
}


def percent(value: float, pct: float) -> float:
    """``pct`` percent of ``value``."""
    return value * (pct / 100.0)


def char_size(width: int, height: int, divisor: int = 60) -> int:
    """Character size scaled to a screen of the given dimensions."""
    return (int(width) + int(height)) // divisor


def _shade(color: Color, pct: float) -> Color:
    # Every channel is taken from the red one, which keeps greys grey.
    level = int(percent(color.r, pct)) & 0xFF
    return Color(level, level, level, color.a)


class ButtonState(IntEnum):
    IDLE = 0
    HOVER = 1
    ACTIVE = 2
    DISABLED = 3


class Button:
    """A rectangular button that reacts to the mouse and darkens with its state."""

    def __init__(
        self,
        position: tuple[float, float],
        size: tuple[float, float],
        fill_color: Color,
        outline_thickness: float = 0.0,
        outline_color: Color = Color.TRANSPARENT,
    ) -> None:
        self.position = (float(position[0]), float(position[1]))
        self.size = (float(size[0]), float(size[1]))
        self.fill_color = fill_color
        self.outline_thickness = float(outline_thickness)
        self.outline_color = outline_color
        self.body_color = fill_color
        self.state = ButtonState.IDLE

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """``(left, top, width, height)`` of the body including an outward outline."""
        grow = max(self.outline_thickness, 0.0)
        x, y = self.position
        w, h = self.size
        return (x - grow, y - grow, w + 2 * grow, h + 2 * grow)

    @property
    def bright_shadow(self) -> tuple[float, float, float, float]:
        """``(left, top, width, height)`` of the inner highlight."""
        t = abs(self.outline_thickness)
        x, y = self.position
        w, h = self.size
        return (x + t, y + t, w - t, h - t)

    @property
    def dark_shadow(self) -> tuple[float, float, float, float]:
        """``(left, top, width, height)`` of the offset drop shadow."""
        t = abs(self.outline_thickness)
        x, y = self.position
        w, h = self.size
        return (x + t, y + t, w, h)

    def contains(self, point: tuple[float, float]) -> bool:
        left, top, width, height = self.bounds
        px, py = point
        return left <= px < left + width and top <= py < top + height

    def update(self, mouse_pos: tuple[float, float], mouse_pressed: bool = False) -> None:
        """Set the state and body colour from the mouse position and left button."""
        if self.state is ButtonState.DISABLED:
            self.body_color = _shade(self.fill_color, 50.0)
            return

        self.state = ButtonState.IDLE
        self.body_color = _shade(self.fill_color, 80.0)

        if self.contains(mouse_pos):
            self.state = ButtonState.HOVER
            self.body_color = _shade(self.fill_color, 70.0)
            if mouse_pressed:
                self.state = ButtonState.ACTIVE
                self.body_color = self.fill_color

    def is_pressed(self) -> bool:
        """Whether the button is being clicked."""
        return self.state is ButtonState.ACTIVE


class TextButton(Button):
    """A button with a centred caption."""

    def __init__(
        self,
        position: tuple[float, float],
        size: tuple[float, float],
        fill_color: Color,
        text: str,
        char_size: int,
        text_color: Color = WHITE,
        outline_thickness: float = 0.0,
        outline_color: Color = Color.TRANSPARENT,
    ) -> None:
        super().__init__(position, size, fill_color, outline_thickness, outline_color)
        self.text = text
        self.char_size = char_size
        self.text_color = text_color
        self.current_text_color = text_color
        self.text_shadow_color = TEXT_SHADOW_COLOR

    @property
    def draws_shadows(self) -> bool:
        """Disabled text buttons are drawn flat."""
        return self.state is not ButtonState.DISABLED

    def update(self, mouse_pos: tuple[float, float], mouse_pressed: bool = False) -> None:
        """Set the state, body colour and caption colour from the mouse."""
        if self.state is ButtonState.DISABLED:
            self.body_color = _shade(self.fill_color, 50.0)
            self.current_text_color = _shade(self.text_color, 50.0)
            return

        self.state = ButtonState.IDLE
        self.body_color = _shade(self.fill_color, 80.0)
        self.current_text_color = _shade(self.text_color, 90.0)

        if self.contains(mouse_pos):
            self.state = ButtonState.HOVER
            self.body_color = self.fill_color
            self.current_text_color = self.text_color
            if mouse_pressed:
                self.state = ButtonState.ACTIVE
                self.body_color = _shade(self.fill_color, 70.0)
                self.current_text_color = _shade(self.text_color, 70.0)


class TextInput:
    """A single-line text field fed with the keys held down each frame."""

    def __init__(
        self,
        position: tuple[float, float],
        size: tuple[float, float],
        body_color: Color,
        char_size: int,
        padding: float,
        outline_thickness: float = 0.0,
        outline_color: Color = Color.TRANSPARENT,
        label: str = "",
    ) -> None:
        self.position = (float(position[0]), float(position[1]))
        self.size = (float(size[0]), float(size[1]))
        self.body_color = body_color
        self.char_size = char_size
        self.padding = float(padding)
        self.outline_thickness = float(outline_thickness)
        self.outline_color = outline_color
        self.label = label
        self.label_color = LABEL_COLOR
        self.value = ""

        self.cursor_visible = True
        self.cursor_timer = 0.0
        self.cursor_timer_max = CURSOR_BLINK_INTERVAL

        self.last_key: Optional[str] = None
        self.repeat = False
        self._key_timer_start = 0.0

    def _toggle_cursor(self) -> None:
        self.cursor_timer = 0.0
        self.cursor_visible = not self.cursor_visible

    def type_char(self, char: str, shift: bool = False) -> None:
        """Append a character, shifted as on a US keyboard if ``shift`` is held."""
        if shift:
            if char in _SHIFTED:
                char = _SHIFTED[char]
            elif char.isalpha():
                char = char.upper()
        self.value += char

    def backspace(self) -> None:
        """Remove the last character, if any."""
        self.value = self.value[:-1]

    def tab(self) -> None:
        """Append a tab character."""
        self.value += "\t"

    def _press(self, key: str, action: Callable[[], None], now: float) -> None:
        elapsed = now - self._key_timer_start
        if self.last_key == key and elapsed > KEY_REPEAT_DELAY:
            self.repeat = True
            action()
        elif self.last_key != key:
            self.repeat = False
            action()
            self._key_timer_start = now
        elif self.repeat:
            action()
        self.last_key = key

    def update(
        self,
        dt: float,
        pressed_keys: Collection[str] = (),
        shift: bool = False,
        now: Optional[float] = None,
    ) -> None:
        """Blink the cursor and apply at most one held key.

        ``pressed_keys`` holds ``"backspace"``, ``"tab"`` or the characters of
        :data:`TYPING_KEYS`. A held key acts once, then repeats every frame
        after it has been held for longer than half a second.
        """
        if now is None:
            now = time.monotonic()

        self.cursor_timer += dt
        if self.cursor_timer >= self.cursor_timer_max:
            self._toggle_cursor()

        if "backspace" in pressed_keys:
            self._press("backspace", self.backspace, now)
            return
        if "tab" in pressed_keys:
            self._press("tab", self.tab, now)
            return
        for key in TYPING_KEYS:
            if key in pressed_keys:
                self._press(key, lambda: self.type_char(key, shift), now)
                return

        self.last_key = None
        self._key_timer_start = now