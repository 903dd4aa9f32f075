"""
RDA CLI - Command Line Interface for the reverse Dutch auction house

Main entry point for all CLI commands.
"""

import json
import logging
from decimal import Decimal
from pathlib import Path

import click

from rda import __version__
from rda.core.config import load_config
from rda.utils.logger import setup_logging


def format_units(value: int, decimals: int = 18) -> str:
    """Render a fixed-point integer as a decimal string."""
    return f"{Decimal(value).scaleb(-decimals).normalize():f}"


def parse_units(value: str, decimals: int = 18) -> int:
    """Parse a decimal string into a fixed-point integer."""
    try:
        scaled = Decimal(value).scaleb(decimals)
    except ArithmeticError:
        raise click.BadParameter(f"not a number: {value}") from None
    if scaled != scaled.to_integral_value():
        raise click.BadParameter(f"too many decimals: {value}")
    return int(scaled)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--env-file", default=None, help="Load RDA_* settings from a .env file")
@click.option("--data-dir", default=None, help="Data directory (overrides RDA_DATA_DIR)")
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, debug, env_file, data_dir):
    """Reverse Dutch Auction house"""
    config = load_config(env_file)
    if data_dir:
        config.data_dir = Path(data_dir).expanduser()

    level = logging.DEBUG if debug else config.logging_level
    setup_logging(level=level, log_dir=str(config.log_dir), log_to_file=config.log_to_file)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# =============================================================================
# Pricing Commands
# =============================================================================


@cli.command("curve")
@click.option("--raw", is_flag=True, help="Print raw fixed-point values")
def curve(raw):
    """Print the decay table (multiplier per halving step)"""
    from rda.core.pricing import DECAY_TABLE

    click.echo("Decay table (2^-k)")
    click.echo("-" * 40)
    for k, value in enumerate(DECAY_TABLE):
        click.echo(f"  {k:>2}  {value if raw else format_units(value)}")


@cli.command("quote")
@click.option("--start", "starting", required=True, help="Starting price (decimal units)")
@click.option("--reserve", "reserved", default="0", help="Reserved price (decimal units)")
@click.option("--decay-rate", required=True, type=int, help="Decay rate (100000 = halve every second)")
@click.option("--duration", required=True, type=int, help="Duration in seconds")
@click.option("--step", default=1, type=int, help="Seconds between rows")
@click.option("--rows", default=20, type=int, help="Maximum rows to print")
def quote(starting, reserved, decay_rate, duration, step, rows):
    """Print the price schedule for a set of auction parameters"""
    from rda.core.auction import AuctionParams, AssetKind, AuctionRecord
    from rda.core.pricing import current_price
    from rda.crypto import address_from_label
    from rda.utils.validation import validate_auction_params

    if step <= 0:
        raise click.BadParameter("step must be positive")

    placeholder = address_from_label("quote")
    params = AuctionParams(
        name="quote",
        description="",
        image_ref="",
        auctioneer=placeholder,
        asset_kind=AssetKind.NON_FUNGIBLE,
        asset_ref=placeholder,
        asset_id_or_amount=0,
        settlement_token=placeholder,
        starting_price=parse_units(starting),
        reserved_price=parse_units(reserved),
        decay_rate=decay_rate,
        duration=duration,
    )
    valid, error = validate_auction_params(params)
    if not valid:
        raise click.ClickException(error)

    record = AuctionRecord.open(0, params, created_at=0)

    click.echo(f"{'elapsed':>8}  price")
    click.echo("-" * 40)
    for elapsed in list(range(0, duration, step))[:rows]:
        click.echo(f"{elapsed:>8}  {format_units(current_price(record, elapsed))}")
    click.echo(f"{duration:>8}  {format_units(current_price(record, duration))}  (deadline)")


# =============================================================================
# Demo Command
# =============================================================================


@cli.command("demo")
@click.option("--persist", is_flag=True, help="Write the demo auctions to the data directory")
@click.pass_context
def demo(ctx, persist):
    """Run a scripted auction: create, decay, claim, withdraw"""
    from rda.core.auction import AssetKind, DutchAuctionHouse
    from rda.core.clock import ManualClock
    from rda.core.custody import InMemoryVault
    from rda.core.errors import AuctionEnded
    from rda.core.pricing import SCALE
    from rda.crypto import address_from_label, short_hex

    config = ctx.obj["config"]

    click.echo("=" * 60)
    click.echo("  REVERSE DUTCH AUCTION - DEMO")
    click.echo("=" * 60)
    click.echo()

    alice = address_from_label("alice")
    bob = address_from_label("bob")
    carol = address_from_label("carol")
    art = address_from_label("collection.art")
    usd = address_from_label("token.usd")

    vault = InMemoryVault()
    vault.mint_nft(art, 7, alice)
    vault.approve_nft(art, 7, alice)
    vault.mint(usd, bob, 1_000 * SCALE)
    vault.approve(usd, bob, 1_000 * SCALE)

    if persist:
        config.persist = True

    clock = ManualClock(start=1_000)
    house = DutchAuctionHouse.from_config(config, custody=vault, clock=clock)
    click.echo(f"  Alice {short_hex(alice)} owns art #7")
    click.echo(f"  Bob   {short_hex(bob)} holds {format_units(vault.balance_of(usd, bob))} USD")
    click.echo()

    auction_id = house.create_auction(
        auctioneer=alice,
        name="Sunset #7",
        description="One of one",
        image_ref="ipfs://sunset-7",
        asset_kind=AssetKind.NON_FUNGIBLE,
        asset_ref=art,
        asset_id_or_amount=7,
        settlement_token=usd,
        starting_price=100 * SCALE,
        reserved_price=10 * SCALE,
        decay_rate=25_000,
        duration=120,
    )
    click.echo(f"🏷️  Auction {auction_id} opened at 100 USD, reserve 10 USD")

    for _ in range(3):
        click.echo(f"  t+{clock.now() - 1_000:>3}s  price {format_units(house.get_current_price(auction_id))} USD")
        clock.advance(4)
    click.echo()

    claim = house.claim_and_withdraw_asset(auction_id, bob)
    click.echo(f"🔨 Bob claims at {format_units(claim.price)} USD; art #7 -> {short_hex(vault.owner_of(art, 7))}")

    try:
        house.claim_and_withdraw_asset(auction_id, carol)
    except AuctionEnded as err:
        click.echo(f"  Carol is too late: {err}")

    clock.advance(1)
    amount = house.withdraw_funds(auction_id, alice)
    click.echo(f"💰 Alice withdraws {format_units(amount)} USD")
    click.echo()

    click.echo("📊 Final Statistics:")
    click.echo(f"  {house.stats()}")
    click.echo("✅ Demo complete!")


# =============================================================================
# Storage Inspection
# =============================================================================


def _open_storage(ctx):
    from rda.core.storage import StorageManager

    config = ctx.obj["config"]
    if not config.db_path.exists():
        raise click.ClickException(f"No auction store at {config.db_path}")
    return StorageManager(config.data_dir, config.db_name)


@cli.group()
def auctions():
    """Inspect persisted auctions"""
    pass


@auctions.command("list")
@click.pass_context
def auctions_list(ctx):
    """List all persisted auctions"""
    storage = _open_storage(ctx)
    records = storage.load_auctions()
    if not records:
        click.echo("No auctions found.")
        return

    for data in records:
        state = "settled" if data["settled"] else "open"
        click.echo(f"  #{data['auction_id']}: {data['name']} ({state}, deadline={data['deadline']})")


@auctions.command("show")
@click.argument("auction_id", type=int)
@click.option("--events", "with_events", is_flag=True, help="Include emitted events")
@click.pass_context
def auctions_show(ctx, auction_id, with_events):
    """Show one persisted auction as JSON"""
    storage = _open_storage(ctx)
    data = storage.load_auction(auction_id)
    if data is None:
        raise click.ClickException(f"Auction {auction_id} not found")

    if with_events:
        data["events"] = [event for _, _, event in storage.load_events(auction_id)]
    click.echo(json.dumps(data, indent=2, sort_keys=True))


@cli.command("stats")
@click.pass_context
def stats(ctx):
    """Show persisted store statistics"""
    storage = _open_storage(ctx)
    click.echo("RDA Store Statistics")
    click.echo("-" * 40)
    for key, value in storage.stats().items():
        click.echo(f"  {key}: {value}")


if __name__ == "__main__":
    cli()
