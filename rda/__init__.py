"""
Reverse Dutch Auction (RDA)

A settlement engine for descending-price auctions:
- Fixed-point exponential decay pricing (table lookup + interpolation)
- One-shot settlement state machine with escrowed proceeds
- Custody of non-fungible and fungible assets
- SQLite persistence and a click CLI
"""

__version__ = "0.1.0"
