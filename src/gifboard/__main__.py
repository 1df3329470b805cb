from __future__ import annotations

import argparse
import logging
import sys
import time

from .config import DEFAULT_URL, LOG_LEVELS, load_settings
from .core.errors import RegistryError
from .sdk.client import UNINITIALIZED, RegistryClient
from .sdk.remote import RemoteRegistryStore


def _build_parser() -> argparse.ArgumentParser:
    settings = load_settings()

    p = argparse.ArgumentParser(prog="gifboard", description="gifboard: shared link registry with voting")
    p.add_argument("--log-level", default=settings.log_level, choices=LOG_LEVELS)
    sub = p.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the registry server")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--state-dir", default=settings.state_dir, help="directory for durable registry files")

    remote = argparse.ArgumentParser(add_help=False)
    remote.add_argument("--url", default=settings.url or DEFAULT_URL)
    remote.add_argument("--key", default=settings.default_key)
    remote.add_argument("--identity", default="cli")
    remote.add_argument("--timeout", type=float, default=settings.timeout_s)

    sub.add_parser("init", parents=[remote], help="initialize the registry (idempotent)")
    sub.add_parser("list", parents=[remote], help="print the registry entries")
    submit = sub.add_parser("submit", parents=[remote], help="append a link")
    submit.add_argument("link")
    for name in ("upvote", "downvote"):
        vote = sub.add_parser(name, parents=[remote], help=f"{name} the entry at INDEX")
        vote.add_argument("index", type=int)

    return p


def _print_view(client: RegistryClient) -> None:
    view = client.current_view()
    if view is UNINITIALIZED:
        print(f"registry '{client.key}' is not initialized (run: gifboard init)")
        return
    print(f"{view.key}: {view.total_count} entries (owner {view.owner})")
    for i, entry in enumerate(view.entries):
        print(f"  [{i}] {entry.score:+d}  {entry.link}  ({entry.submitter})")


def _serve(args: argparse.Namespace) -> int:
    from .runtime.server import run

    srv = run(
        host=args.host,
        port=args.port,
        state_dir=args.state_dir,
        log_level=args.log_level,
        new_server=True,
    )
    print(srv.url)

    # Block forever (so it behaves like a normal CLI server)
    while True:
        time.sleep(3600)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=str(args.log_level).upper(), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "serve":
        return _serve(args)

    store = RemoteRegistryStore(args.url, timeout_s=args.timeout)
    client = RegistryClient(store, args.key, args.identity)

    try:
        if args.command == "init":
            client.ensure_initialized()
        elif args.command == "submit":
            index = client.submit(args.link)
            print(f"added entry {index}")
        elif args.command == "upvote":
            print(f"score {client.upvote(args.index):+d}")
        elif args.command == "downvote":
            print(f"score {client.downvote(args.index):+d}")
        else:
            client.refresh()
        _print_view(client)
    except RegistryError as ex:
        print(f"error: {ex.kind}: {ex.detail}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
