"""Presentation-shell state for one auction page session."""

from src.live_auctioneer.client.api import AuctionApiClient
from src.live_auctioneer.client.playback import PlaybackOrchestrator
from src.live_auctioneer.client.speech import SpeechSynthesizer
from src.live_auctioneer.config import Settings
from src.live_auctioneer.models.auction import AuctionLot, AuctionScript
from src.live_auctioneer.models.avatar import AvatarDescriptor
from src.live_auctioneer.services.catalog import featured_avatar

BID_INCREMENT = 250


class AuctionSession:
    """Decorative bidding counters plus the auctioneer selected for this session.

    Nothing here is persisted or shared between sessions.
    """

    def __init__(
        self,
        settings: Settings,
        lot: AuctionLot | None = None,
        script: AuctionScript | None = None,
    ) -> None:
        self.settings = settings
        self.lot = lot or AuctionLot()
        self.script = script or AuctionScript()
        self.current_bid = self.lot.current_bid
        self.bidders = 47
        self.time_remaining = "5:24"
        self.avatars: list[AvatarDescriptor] = []
        self.selected_avatar: AvatarDescriptor | None = None

    def place_bid(self) -> int:
        self.current_bid += BID_INCREMENT
        self.bidders += 1
        return self.current_bid

    def select_avatar(self) -> AvatarDescriptor:
        """Select the configured featured auctioneer; the vendor list is not consulted."""
        avatar = featured_avatar(self.settings)
        self.avatars = [avatar]
        self.selected_avatar = avatar
        return avatar

    def playback(
        self,
        api: AuctionApiClient,
        speech: SpeechSynthesizer | None = None,
        **kwargs,
    ) -> PlaybackOrchestrator:
        if self.selected_avatar is None:
            self.select_avatar()
        kwargs.setdefault("poll_interval", self.settings.poll_interval)
        kwargs.setdefault("poll_max_attempts", self.settings.poll_max_attempts)
        return PlaybackOrchestrator(
            api,
            self.selected_avatar,
            self.script.content,
            speech=speech,
            **kwargs,
        )
