"""
Sky phase classification and gradient colors.

The phase is a pure function of the local hour and the solar altitude. Each
phase owns a 3-stop gradient ordered from the top of the sky to the horizon.
"""
from enum import Enum


class SkyPhase(Enum):
    """Discrete lighting phase of the sky."""
    BEFORE_DAWN = "beforeDawn"
    SUNRISE = "sunrise"
    DAYTIME = "daytime"
    SUNSET = "sunset"
    NIGHT = "night"


SKY_COLORS = {
    # Deep blue to violet
    SkyPhase.BEFORE_DAWN: ['#0a0e27', '#1a1f3a', '#2a3a5a'],
    # Orange to yellow
    SkyPhase.SUNRISE: ['#FF6B35', '#F7931E', '#FDC830'],
    # Clear blue
    SkyPhase.DAYTIME: ['#87CEEB', '#5BA3D0', '#4A90E2'],
    # Orange to red
    SkyPhase.SUNSET: ['#FF6B35', '#FF4E50', '#FC913A'],
    # Navy to black
    SkyPhase.NIGHT: ['#0a0a1a', '#1a1a2e', '#16213e'],
}


def classify_sky_phase(hour, altitude):
    """
    Classify the sky for a local hour and solar altitude.

    Args:
        hour: Local decimal hour. Only compared against noon, never wrapped.
        altitude: Solar altitude in degrees, unclamped.

    Returns:
        SkyPhase
    """
    if altitude < -6:
        return SkyPhase.NIGHT

    # Civil twilight band
    if altitude < 0:
        return SkyPhase.BEFORE_DAWN if hour < 12 else SkyPhase.NIGHT

    if altitude < 6:
        return SkyPhase.SUNRISE if hour < 12 else SkyPhase.SUNSET

    return SkyPhase.DAYTIME


def get_sky_colors(phase):
    """Return the gradient stops for a phase (top of sky first)."""
    return list(SKY_COLORS[phase])


def hex_to_rgb(color):
    """'#RRGGBB' -> (r, g, b)"""
    return tuple(int(color[i:i + 2], 16) for i in (1, 3, 5))


def rgb_to_hex(rgb):
    return '#{:02x}{:02x}{:02x}'.format(*rgb)


def interpolate_color(color1, color2, progress):
    """
    Linearly interpolate two '#RRGGBB' colors channel by channel.

    Channels are rounded to the nearest integer.
    """
    progress = min(1.0, max(0.0, progress))
    c1 = hex_to_rgb(color1)
    c2 = hex_to_rgb(color2)
    # round-half-up to match integer pixel rounding
    mixed = tuple(int(a + (b - a) * progress + 0.5) for a, b in zip(c1, c2))
    return rgb_to_hex(mixed)


def interpolate_sky_colors(from_phase, to_phase, progress):
    """
    Blend two phase gradients for transition playback.

    Args:
        from_phase: Starting SkyPhase
        to_phase: Target SkyPhase
        progress: Fraction in [0, 1]; values outside are clamped

    Returns:
        List of '#rrggbb' stops, one per stop index
    """
    from_colors = SKY_COLORS[from_phase]
    to_colors = SKY_COLORS[to_phase]
    n_stops = min(len(from_colors), len(to_colors))
    return [interpolate_color(from_colors[i], to_colors[i], progress) for i in range(n_stops)]
