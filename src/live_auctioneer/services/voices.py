"""Voice mapping between Microsoft neural voices and the vendor's Amazon voices."""

from typing import NamedTuple

import structlog

logger = structlog.get_logger()

DEFAULT_MALE_VOICE = "Matthew"
DEFAULT_FEMALE_VOICE = "Aria"

DEFAULT_MALE_SOURCE_VOICE = "en-US-DavisNeural"
DEFAULT_FEMALE_SOURCE_VOICE = "en-US-AriaNeural"

CLONED_VOICE_PREFIXES = ("custom_", "cloned_")

AMAZON_PROVIDER = "amazon"
CLONED_VOICE_PROVIDER = "microsoft"

VOICE_MAP: dict[str, str] = {
    "en-US-AriaNeural": "Aria",
    "en-US-JennyNeural": "Joanna",
    "en-US-DavisNeural": "Matthew",
    "en-US-BrianMultilingualNeural": "Brian",
    "en-US-EmmaMultilingualNeural": "Emma",
    "en-US-AndrewMultilingualNeural": "Matthew",
    "en-US-AshleyNeural": "Aria",
    "en-US-GuyNeural": "Joey",
    "en-US-SaraNeural": "Aria",
    "en-US-NovaTurboMultilingualNeural": "Aria",
    "en-US-AlloyTurboMultilingualNeural": "Matthew",
    "en-US-OnyxTurboMultilingualNeural": "Matthew",
    "en-US-SteffanMultilingualNeural": "Matthew",
    "en-US-RyanMultilingualNeural": "Matthew",
    "en-GB-AdaMultilingualNeural": "Amy",
    "en-GB-OliverNeural": "Brian",
    "en-GB-OllieMultilingualNeural": "Brian",
    "en-AU-WilliamNeural": "Matthew",
    "es-US-PalomaNeural": "Lucia",
}


class VoiceSelection(NamedTuple):
    voice_id: str
    provider: str

    @property
    def is_cloned(self) -> bool:
        return self.provider == CLONED_VOICE_PROVIDER


def map_voice(source_voice_id: str | None, gender: str | None = None) -> str:
    """Map a Microsoft voice id to an Amazon one, falling back by gender."""
    mapped = VOICE_MAP.get(source_voice_id or "")
    if mapped is None:
        mapped = DEFAULT_MALE_VOICE if gender == "male" else DEFAULT_FEMALE_VOICE
    logger.debug("Voice mapped", source=source_voice_id, gender=gender, mapped=mapped)
    return mapped


def is_cloned_voice(voice_id: str | None, has_custom_voice: bool = False) -> bool:
    return bool(has_custom_voice) or (voice_id or "").startswith(CLONED_VOICE_PREFIXES)


def resolve_voice_for_custom_avatar(
    voice_id: str | None, gender: str | None = None, has_custom_voice: bool = False
) -> VoiceSelection:
    """Cloned voices pass through untouched and use the alternate provider."""
    if is_cloned_voice(voice_id, has_custom_voice) and voice_id:
        logger.debug("Using cloned voice", voice_id=voice_id)
        return VoiceSelection(voice_id, CLONED_VOICE_PROVIDER)
    return VoiceSelection(map_voice(voice_id, gender), AMAZON_PROVIDER)


def default_source_voice(gender: str | None) -> str:
    return DEFAULT_MALE_SOURCE_VOICE if gender == "male" else DEFAULT_FEMALE_SOURCE_VOICE
