import asyncio
import sys

import msgspec.json

from odds_client.client import OddsAPIClient
from odds_client.env import Env
from odds_client.errors import OddsAPIError
from odds_client.logger import logger, setup_logging
from odds_client.migration import (
    generate_bookmaker_migration_report,
    generate_market_migration_report,
)
from odds_client.utils import batch

USAGE = f"""Usage: {sys.argv[0]} <command> [args]

  sports
  odds <sport> [market ...]
  scores <sport> [sport ...]
  events <sport>
  participants <sport>
  markets <sport> <event_id>
  migrate-markets <key> [key ...]
  migrate-bookmakers <key> [key ...]"""


def _print(obj: object):
    print(msgspec.json.format(msgspec.json.encode(obj)).decode())


async def _run(client: OddsAPIClient, command: str, args: list[str]):
    match command, args:
        case "sports", []:
            res = await client.get_sports()
        case "odds", [sport, *markets]:
            res = await client.get_odds(sport, markets=markets or ["h2h", "spreads", "totals"])
        case "scores", [_, *_]:
            results = await batch(client.get_scores(sport) for sport in args)
            for res in results:
                _print(res.data)
            logger.info(f"quota remaining: {results[-1].quota.requests_remaining}")
            return
        case "events", [sport]:
            res = await client.get_events(sport)
        case "participants", [sport]:
            res = await client.get_participants(sport)
        case "markets", [sport, event_id]:
            res = await client.discover_event_markets(sport, event_id)
        case _:
            print(USAGE)
            return

    _print(res.data)
    logger.info(
        f"estimated cost: {res.estimated_cost}, "
        f"quota remaining: {res.quota.requests_remaining}"
    )


async def main():
    setup_logging()

    if len(sys.argv) < 2:
        print(USAGE)
        return

    command, args = sys.argv[1], sys.argv[2:]

    match command:
        case "migrate-markets":
            _print(generate_market_migration_report(args))
            return
        case "migrate-bookmakers":
            _print(generate_bookmaker_migration_report(args))
            return

    if not Env.ODDS_API_KEY:
        print("ODDS_API_KEY not set", file=sys.stderr)
        raise SystemExit(1)

    async with OddsAPIClient(
        Env.ODDS_API_KEY,
        use_ipv6=Env.ODDS_API_USE_IPV6,
        timeout=Env.ODDS_API_TIMEOUT,
    ) as client:
        try:
            await _run(client, command, args)
        except OddsAPIError as e:
            logger.error(f"{e} - {e.guidance}")
            print(e.user_message, file=sys.stderr)
            raise SystemExit(1) from e


if __name__ == "__main__":
    asyncio.run(main())
