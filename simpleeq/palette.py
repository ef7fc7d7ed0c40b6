"""Colours used by the equaliser's user interface."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Colour:
    """A colour stored as a 32-bit ARGB value."""

    argb: int

    def __post_init__(self) -> None:
        if not 0 <= self.argb <= 0xFFFFFFFF:
            raise ValueError(f"ARGB value out of range: {self.argb:#x}")

    @classmethod
    def from_rgba(cls, red: int, green: int, blue: int, alpha: int) -> "Colour":
        """Build a colour from 8-bit red, green, blue and alpha components."""
        for name, component in (
            ("red", red),
            ("green", green),
            ("blue", blue),
            ("alpha", alpha),
        ):
            if not 0 <= component <= 0xFF:
                raise ValueError(f"{name} component out of range: {component}")
        return cls((alpha << 24) | (red << 16) | (green << 8) | blue)

    @property
    def alpha(self) -> int:
        return (self.argb >> 24) & 0xFF

    @property
    def red(self) -> int:
        return (self.argb >> 16) & 0xFF

    @property
    def green(self) -> int:
        return (self.argb >> 8) & 0xFF

    @property
    def blue(self) -> int:
        return self.argb & 0xFF

    def to_rgba(self) -> tuple[int, int, int, int]:
        """Return the components as (red, green, blue, alpha)."""
        return (self.red, self.green, self.blue, self.alpha)

    def to_hex(self) -> str:
        """Return the colour as eight lower-case hex digits in ARGB order."""
        return f"{self.argb:08x}"


class Palette:
    """Named colours of the interface."""

    # General
    TEXT_COLOUR = Colour(0xFFFEFFFF)

    # Knob
    KNOB_BG_GRADIENT_TOP = Colour(0xFF191A24)
    KNOB_BG_GRADIENT_BOTTOM = Colour(0xFF222534)
    KNOB_BORDER = Colour(0xFF18181F)
    KNOB_INLINE_SHADOW_1 = Colour(0xC535374C)
    KNOB_INLINE_SHADOW_2 = Colour(0x3C35374C)
    KNOB_INLINE_SHADOW_3 = Colour(0x0035374C)
    # PI = position indicator
    KNOB_PI_GRADIENT_TOP = Colour(0x61BDBDC6)
    KNOB_PI_GRADIENT_BOTTOM = Colour(0xFFBDBDC6)
    KNOB_RANGE = Colour(0xFF22222F)
    KNOB_RANGE_APPLIED = Colour(0xF0FEFFFF)

    # Control container
    CONTROLS_CONTAINER = Colour(0xFF1E1E2C)

    # Response curve
    BRIGHT_GRILL_LINE = Colour.from_rgba(255, 255, 255, 50)
    DARK_GRILL_LINE = Colour.from_rgba(255, 255, 255, 25)

    # FFT curve
    FFT_BODY_GRADIENT_1 = Colour(0x20B2B2BE)
    FFT_BODY_GRADIENT_2 = Colour(0x09B2B2BE)
    FFT_BODY_GRADIENT_3 = Colour(0x00B2B2BE)
    FFT_OUTLINE_GRADIENT_1 = TEXT_COLOUR
    FFT_OUTLINE_GRADIENT_2 = Colour(0x14ADADB9)
    FFT_OUTLINE_GRADIENT_3 = Colour(0x05ADADB9)