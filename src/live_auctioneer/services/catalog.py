"""Built-in auctioneer avatars: the vendor-outage fallback pair and the featured one."""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.live_auctioneer.models.avatar import AvatarDescriptor

if TYPE_CHECKING:
    from src.live_auctioneer.config import Settings

FALLBACK_AVATARS = (
    AvatarDescriptor(
        id="fallback-1",
        name="Professional Avatar",
        image=(
            "https://images.pexels.com/photos/2379004/pexels-photo-2379004.jpeg"
            "?auto=compress&cs=tinysrgb&w=800"
        ),
        voice="Authoritative, confident, corporate",
        specialty="Business presentations, auctions",
        voice_id="en-US-DavisNeural",
    ),
    AvatarDescriptor(
        id="fallback-2",
        name="Friendly Avatar",
        image=(
            "https://images.pexels.com/photos/1516680/pexels-photo-1516680.jpeg"
            "?auto=compress&cs=tinysrgb&w=800"
        ),
        voice="Analytical, calm, methodical",
        specialty="Investigations, analysis",
        voice_id="en-US-AriaNeural",
    ),
)


def featured_avatar(settings: Settings) -> AvatarDescriptor:
    """The auctioneer the page always presents, taken from configuration."""
    return AvatarDescriptor(
        id=settings.featured_avatar_id,
        name=settings.featured_avatar_name,
        image=settings.featured_avatar_image,
        voice=settings.featured_avatar_voice,
        specialty=settings.featured_avatar_specialty,
        voice_id=settings.featured_avatar_voice_id,
        gender=settings.featured_avatar_gender,
        is_custom=settings.featured_avatar_is_custom,
        has_custom_voice=settings.featured_avatar_has_custom_voice,
    )
