"""Static auction lot and auctioneer script shown on the page."""

from pydantic import BaseModel

from src.live_auctioneer.models.avatar import AvatarDescriptor

OPENING_SCRIPT = (
    "Welcome to tonight's exclusive firearms auction. Up first is a pristine 1911 pistol, "
    "known for its historical value and expert craftsmanship. Bidding begins at $5,000."
)


class AuctionLot(BaseModel):
    lot_number: str = "59557"
    title: str = "Pristine 1911 Pistol"
    description: str = OPENING_SCRIPT
    current_bid: int = 5000
    asking_price: int = 5500
    estimated_value: str = "5,000 - 7,500"
    condition: str = "Excellent"
    era: str = "WWI Era"
    image: str = "https://images.unsplash.com/photo-1595590424283-b8f17842773f?w=400&h=300&fit=crop"


class AuctionScript(BaseModel):
    title: str = "Live Auction"
    content: str = OPENING_SCRIPT


class AuctionInfo(BaseModel):
    """Response body for GET /auction."""

    lot: AuctionLot
    script: AuctionScript
    auctioneer: AvatarDescriptor
