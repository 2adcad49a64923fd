"""Entry point for `python -m src.live_auctioneer`."""

import argparse
import asyncio
import logging

import structlog
import uvicorn

from src.live_auctioneer.api.app import create_app
from src.live_auctioneer.client.api import AuctionApiClient
from src.live_auctioneer.client.session import AuctionSession
from src.live_auctioneer.config import Settings

logger = structlog.get_logger()


def serve(settings: Settings) -> None:
    logger.info("Starting Live Auctioneer", host=settings.host, port=settings.port)
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, reload=False, workers=1)


async def run_auction(settings: Settings, server_url: str) -> None:
    """Drive one auction start against a running server and report what the page would show."""
    session = AuctionSession(settings)
    avatar = session.select_avatar()
    playback = session.playback(AuctionApiClient(server_url))
    logger.info("Starting auction", lot=session.lot.lot_number, auctioneer=avatar.name)

    await playback.toggle()
    await playback.wait()

    logger.info(
        "Auction finished",
        status=playback.status,
        video_url=playback.video_url or None,
        local_speech=playback.using_local_speech,
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="live_auctioneer")
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("serve", help="run the HTTP API (default)")
    auction = sub.add_parser("auction", help="start the auctioneer against a running server")
    auction.add_argument("--server", default=None, help="server base URL")
    args = parser.parse_args(argv)

    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper())

    if args.command == "auction":
        server_url = args.server or f"http://localhost:{settings.port}"
        asyncio.run(run_auction(settings, server_url))
    else:
        serve(settings)


if __name__ == "__main__":
    main()
