#!/usr/bin/env python
"""
Walk a GoTrue session through its lifecycle with the async client.

Signs in (signing up first if asked), updates the user's metadata, keeps the
session fresh in the background for a while, then signs out.

Usage:
    export GOTRUE_URL=http://localhost:9999
    python examples/session_lifecycle.py --email a@example.com --password 'Abcd1234!' --sign-up
"""

import argparse
import asyncio
import logging
import os

from gotrue_client import AsyncGoTrueClient, Email, GoTrueError, UserAttributes


async def run(args: argparse.Namespace) -> None:
    headers = {"apikey": os.environ["GOTRUE_API_KEY"]} if os.environ.get("GOTRUE_API_KEY") else None

    async with AsyncGoTrueClient(args.url, headers=headers, auto_refresh_token=True) as client:
        selector = Email(args.email)

        if args.sign_up:
            await client.sign_up(selector, args.password)
        else:
            await client.sign_in(selector, args.password)
        print(f"Signed in as {client.user.email}, token expires at {client.session.expires_at}")

        user = await client.update_user(UserAttributes(data={"last_example_run": "session_lifecycle"}))
        print(f"Metadata: {user.user_metadata}")

        # Background refresh runs while we wait.
        await asyncio.sleep(args.hold)

        if await client.sign_out():
            print("Signed out")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--url", default=None, help="Service URL (default: $GOTRUE_URL)")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--sign-up", action="store_true", help="Create the account first")
    parser.add_argument("--hold", type=float, default=5.0, help="Seconds to stay signed in")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG)
    try:
        asyncio.run(run(args))
    except GoTrueError as e:
        raise SystemExit(f"error: {e}")


if __name__ == "__main__":
    main()
