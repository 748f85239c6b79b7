"""tora - follow a log index from the terminal."""

import logging
import sys
import threading
from argparse import ArgumentParser
from typing import Optional

from .client import SearchClient
from .config import load_config
from .dispatcher import Dispatcher
from .exceptions import ToraError
from .formatter import print_batch
from .models import LogBatch, SearchQuery
from .poller import PollState, Poller

logger = logging.getLogger(__name__)


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = ArgumentParser(
        prog="tora",
        description="Follow log entries from a search index as they arrive.",
    )
    parser.add_argument(
        "-c", "--cfg",
        help="JSON file with credentials (default: ~/.torars_rc)",
    )
    parser.add_argument(
        "-i", "--index",
        required=True,
        help="Index to query",
    )
    parser.add_argument(
        "-q", "--query",
        required=True,
        help="Query to search for (empty string matches everything)",
    )
    parser.add_argument(
        "--url",
        help="Override the backend URL from the config file",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every poll round to stderr",
    )
    return parser


def render(batch: LogBatch) -> None:
    """Consumer callback: print a delivered batch to stdout."""
    print_batch(batch)


def consume(dispatcher: Dispatcher) -> None:
    """Consumer task. A closed stdout ends the stream quietly."""
    try:
        dispatcher.consume(render)
    except BrokenPipeError:
        logger.debug("stdout closed, consumer exiting")


def run(args) -> int:
    """Wire config, client, dispatcher and poller, then poll until done."""
    config = load_config(args.cfg)

    client = SearchClient(
        base_url=args.url or config.url,
        auth=config.auth,
        index_prefix=config.index_prefix,
    )
    dispatcher = Dispatcher()
    poller = Poller(client, dispatcher)
    state = PollState(
        index=args.index,
        query=SearchQuery(query=args.query, size=config.page_size),
    )

    consumer = threading.Thread(
        target=consume, args=(dispatcher,), name="tora-consumer", daemon=True
    )
    consumer.start()

    try:
        with client:
            poller.run(state)
    finally:
        dispatcher.close()
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        return run(args)
    except ToraError as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    sys.exit(main())
