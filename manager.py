#!/usr/bin/env python3
"""Book Manager CLI - inventory CRUD over the book service."""
import argparse
import asyncio
import sys
import logging

from bookmanager.async_client import AsyncBookServiceClient
from bookmanager.client import BookServiceClient
from bookmanager.config import Config
from bookmanager.manager import AsyncBookManager, BookManager, BookManagerState
from bookmanager.render import render_banner, render_books, render_fetched
from bookmanager.shell import Shell

logger = logging.getLogger(__name__)

# argparse dest -> service field name
FORM_ARGS = {
    "id": "id",
    "title": "title",
    "author": "author",
    "genre": "genre",
    "price": "price",
    "published_year": "publishedYear",
    "stock": "stock",
}


def fill_form(manager: BookManagerState, args):
    """Copy --field options into the edit buffer."""
    for dest, field in FORM_ARGS.items():
        manager.handle_change(field, getattr(args, dest))


def report(manager: BookManagerState, args) -> bool:
    """Print the outcome of a one-shot command; True if it succeeded."""
    if args.command == "list" and not (manager.message and manager.message.is_error):
        print(render_books(manager.books, args.format))
    elif args.command == "get" and manager.fetched_book:
        print(render_fetched(manager.fetched_book))

    banner = render_banner(manager.message)
    if banner:
        print(banner)
    return not (manager.message and manager.message.is_error)


def run_sync(args) -> bool:
    """Run a one-shot command with the blocking client."""
    with BookServiceClient(args.api_url, timeout=args.timeout) as client:
        manager = BookManager(client)

        if args.command == "shell":
            Shell(manager).run()
            return True

        if args.command == "list":
            manager.mount()
        elif args.command == "get":
            manager.id_to_fetch = str(args.book_id)
            manager.get_book_by_id()
        elif args.command == "add":
            fill_form(manager, args)
            manager.add_book()
        elif args.command == "update":
            fill_form(manager, args)
            manager.update_book()
        elif args.command == "delete":
            manager.delete_book(args.book_id)

        return report(manager, args)


async def run_async(args) -> bool:
    """Run a one-shot command with the async client."""
    async with AsyncBookServiceClient(args.api_url, timeout=args.timeout) as client:
        manager = AsyncBookManager(client)

        if args.command == "list":
            await manager.mount()
        elif args.command == "get":
            manager.id_to_fetch = str(args.book_id)
            await manager.get_book_by_id()
        elif args.command == "add":
            fill_form(manager, args)
            await manager.add_book()
        elif args.command == "update":
            fill_form(manager, args)
            await manager.update_book()
        elif args.command == "delete":
            await manager.delete_book(args.book_id)

        return report(manager, args)


def add_form_arguments(parser):
    """Book fields for add/update; missing ones are reported by form validation."""
    parser.add_argument("--id", type=int, default=None, help="Book ID")
    parser.add_argument("--title", default=None, help="Title")
    parser.add_argument("--author", default=None, help="Author")
    parser.add_argument("--genre", default=None, help="Genre")
    parser.add_argument("--price", type=float, default=None, help="Price")
    parser.add_argument("--published-year", type=int, default=None, help="Published year")
    parser.add_argument("--stock", type=int, default=None, help="Copies in stock")


def build_parser(config: Config) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Book Manager - inventory CRUD over the book service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List all books
  %(prog)s list

  # Add a book
  %(prog)s add --id 1 --title Dune --author Herbert --genre SciFi \\
      --price 15 --published-year 1965 --stock 10

  # Look one up, then delete it
  %(prog)s get 1
  %(prog)s delete 1

  # Interactive form
  %(prog)s shell
        """
    )
    parser.add_argument("--api-url", default=config.BOOK_API_URL,
                        help=f"Book service base path (default: {config.BOOK_API_URL})")
    parser.add_argument("--timeout", type=int, default=config.DEFAULT_TIMEOUT,
                        help=f"Request timeout in seconds (default: {config.DEFAULT_TIMEOUT})")
    parser.add_argument("--async", dest="use_async", action="store_true",
                        help="Use async client for one-shot commands")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # List command
    list_parser = subparsers.add_parser("list", help="List all books")
    list_parser.add_argument("--format", choices=["table", "json", "compact"], default="table",
                             help="Output format")

    # Get command
    get_parser = subparsers.add_parser("get", help="Fetch one book by ID")
    get_parser.add_argument("book_id", help="Book ID")

    # Add / update commands
    add_parser = subparsers.add_parser("add", help="Add a book")
    add_form_arguments(add_parser)
    update_parser = subparsers.add_parser("update", help="Replace a book (all fields)")
    add_form_arguments(update_parser)

    # Delete command
    delete_parser = subparsers.add_parser("delete", help="Delete a book by ID")
    delete_parser.add_argument("book_id", help="Book ID")

    # Shell command
    subparsers.add_parser("shell", help="Interactive form (blocking client)")

    return parser


def main():
    """Main CLI entry point."""
    config = Config()

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    parser = build_parser(config)
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        if args.use_async and args.command != "shell":
            ok = asyncio.run(run_async(args))
        else:
            ok = run_sync(args)
    except KeyboardInterrupt:
        logger.info("\n⚠️  Interrupted by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"❌ Error: {e}", exc_info=True)
        sys.exit(1)

    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
