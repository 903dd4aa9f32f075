"""
Auction errors.

Every failure is raised synchronously to the caller; the house never
recovers from one internally. Catch ``AuctionError`` for all of them.
"""

from typing import Optional


class AuctionError(Exception):
    """Base exception for auction operations"""

    def __init__(self, auction_id: Optional[int] = None, message: str = ""):
        self.auction_id = auction_id
        if auction_id is not None:
            message = f"auction {auction_id}: {message}" if message else f"auction {auction_id}"
        super().__init__(message)


class InvalidAuctionId(AuctionError):
    """Raised when no auction exists under the given id"""


class InvalidParams(AuctionError):
    """Raised when creation parameters fail validation"""

    def __init__(self, message: str):
        super().__init__(None, message)


class AuctionEnded(AuctionError):
    """Raised when pricing or claiming an auction that can no longer be claimed"""


class NotAuctioneer(AuctionError):
    """Raised when a caller other than the auctioneer withdraws proceeds"""


class NoFundsAvailable(AuctionError):
    """Raised when there are no escrowed proceeds to withdraw"""


class AuctionStillOngoing(AuctionError):
    """Raised when withdrawing before the auction is settled or expired"""
