#!/usr/bin/env python3
"""
Interactive terminal front end for the movie explorer.

Talks to a running proxy API (`uvicorn api.main:app`, installed with the `serve`
extra) and keeps favorites in a local JSON file.

Commands:
  search <text>        type into the search box (empty text clears it)
  open <id>            open the detail modal for a movie
  fav <id>             add a search result to favorites and open it
  add                  add the movie shown in the modal to favorites
  rm <id>              remove a favorite
  rate <id> <1-5>      set a favorite's rating
  note <id> <text>     set a favorite's note
  close                close the modal
  view search|favorites
  quit
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import shlex
import sys

from movie_explorer.ui.api_client import ExplorerApiClient
from movie_explorer.ui.controller import DEFAULT_DEBOUNCE_SECONDS, ExplorerController
from movie_explorer.ui.state import ViewMode
from movie_explorer.ui.storage import FileFavoritesStorage, LoadStatus, get_storage
from movie_explorer.ui.views import render_page
from movie_explorer.utils.env import load_env

PROMPT = "explorer> "


class CommandError(ValueError):
    pass


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="movie_explorer_cli",
        description="Search movies and keep a local favorites list.",
    )
    parser.add_argument("--api-base-url", default=None, help="Proxy API base URL (default: EXPLORER_API_BASE_URL).")
    parser.add_argument(
        "--favorites-path",
        default=None,
        help="Favorites JSON file (default: EXPLORER_FAVORITES_PATH or ~/.movie_explorer/favorites.json).",
    )
    parser.add_argument(
        "--debounce-ms",
        type=int,
        default=int(DEFAULT_DEBOUNCE_SECONDS * 1000),
        help="Search debounce delay in milliseconds.",
    )
    parser.add_argument("--env-file", default=None, help="Read settings from this .env file instead of the default locations.")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING).")
    return parser.parse_args(argv)


def _movie_id(raw: str) -> int:
    s = raw.strip()
    if not s.isdigit():
        raise CommandError(f"Not a movie id: {raw!r}")
    return int(s)


def parse_command(line: str) -> tuple[str, list[str]]:
    """Split an input line into a command name and its arguments."""
    line = line.strip()
    if not line:
        return "", []
    name, _, rest = line.partition(" ")
    name = name.lower()
    # Free text keeps its spacing.
    if name == "search":
        return name, [rest.strip()]
    if name == "note":
        movie_id, _, text = rest.strip().partition(" ")
        return name, [movie_id, text]
    try:
        return name, shlex.split(rest)
    except ValueError as e:
        raise CommandError(f"Cannot parse {line!r}: {e}") from e


def apply_command(controller: ExplorerController, name: str, args: list[str]) -> bool:
    """
    Run one command against the controller.

    Returns False when the session should end.
    """
    state = controller.state
    if name in {"quit", "exit"}:
        return False
    if name == "search":
        controller.set_query(args[0] if args else "")
    elif name == "open" and args:
        controller.open_details(_movie_id(args[0]))
    elif name == "fav" and args:
        movie_id = _movie_id(args[0])
        result = next((r for r in state.results if r.id == movie_id), None)
        if result is None:
            raise CommandError(f"Movie {movie_id} is not in the current results.")
        controller.add_favorite_from_result(result)
    elif name == "add":
        if not state.modal_open or state.details is None:
            raise CommandError("No movie details are open.")
        controller.add_favorite(state.details)
    elif name == "rm" and args:
        controller.remove_favorite(_movie_id(args[0]))
    elif name == "rate" and len(args) >= 2:
        try:
            rating = int(args[1])
            controller.update_favorite(_movie_id(args[0]), rating=rating)
        except ValueError as e:
            raise CommandError(str(e)) from e
    elif name == "note" and len(args) >= 2:
        controller.update_favorite(_movie_id(args[0]), note=args[1])
    elif name == "close":
        controller.close_modal()
    elif name == "view" and args:
        try:
            controller.switch_view(ViewMode(args[0].lower()))
        except ValueError as e:
            raise CommandError(f"Unknown view: {args[0]!r}") from e
    elif name:
        raise CommandError(f"Unknown command: {name!r}")
    return True


async def _run(args: argparse.Namespace) -> int:
    storage = FileFavoritesStorage(args.favorites_path) if args.favorites_path else get_storage()
    controller = ExplorerController(
        ExplorerApiClient(args.api_base_url),
        storage,
        debounce_seconds=max(0, args.debounce_ms) / 1000.0,
    )
    if controller.favorites_load_status is LoadStatus.CORRUPT:
        print("Stored favorites could not be read; starting with an empty list.", file=sys.stderr)

    print("\n".join(render_page(controller.state)))
    try:
        while True:
            try:
                line = await asyncio.to_thread(input, PROMPT)
            except EOFError:
                break
            try:
                name, cmd_args = parse_command(line)
                if not apply_command(controller, name, cmd_args):
                    break
            except CommandError as e:
                print(f"error: {e}", file=sys.stderr)
                continue
            await controller.wait_idle()
            print("\n".join(render_page(controller.state)))
    finally:
        await controller.aclose()
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    load_env(args.env_file)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
