from luminary.models.shows.alternating import AlternatingColorsShow
from luminary.models.shows.bass_drop import BassDropShow
from luminary.models.shows.fire import FireEffectShow
from luminary.models.shows.gradient_flow import GradientDirection, GradientFlowShow
from luminary.models.shows.haunted_spirits import HauntedSpiritsShow
from luminary.models.shows.neon_party import NeonPartyShow, Palette
from luminary.models.shows.ocean_waves import OceanWavesShow
from luminary.models.shows.pulse import ColorPulseShow
from luminary.models.shows.rainbow_wave import RainbowWaveShow
from luminary.models.shows.snake import SnakeShow
from luminary.models.shows.solid import SolidColorShow
from luminary.models.shows.sound_reactive import SoundReactiveShow, Theme
from luminary.models.shows.strobe import StrobeShow
from luminary.models.shows.twinkle import TwinkleShow
from luminary.models.shows.wave import WaveColorShow

# Registration order of the built-in catalog.
BUILTIN_SHOWS = (
    SolidColorShow,
    AlternatingColorsShow,
    WaveColorShow,
    RainbowWaveShow,
    ColorPulseShow,
    GradientFlowShow,
    StrobeShow,
    TwinkleShow,
    FireEffectShow,
    OceanWavesShow,
    SnakeShow,
    SoundReactiveShow,
    NeonPartyShow,
    BassDropShow,
    HauntedSpiritsShow,
)

__all__ = [
    "AlternatingColorsShow",
    "BassDropShow",
    "BUILTIN_SHOWS",
    "ColorPulseShow",
    "FireEffectShow",
    "GradientDirection",
    "GradientFlowShow",
    "HauntedSpiritsShow",
    "NeonPartyShow",
    "OceanWavesShow",
    "Palette",
    "RainbowWaveShow",
    "SnakeShow",
    "SolidColorShow",
    "SoundReactiveShow",
    "StrobeShow",
    "Theme",
    "TwinkleShow",
    "WaveColorShow",
]
