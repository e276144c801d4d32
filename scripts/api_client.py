"""Lightweight REST client for the pyauction API."""

from __future__ import annotations

import argparse
import json

import httpx


def _print(resp: httpx.Response) -> None:
    resp.raise_for_status()
    print(json.dumps(resp.json(), indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the pyauction REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--state", action="store_true", help="Print the current auction state")
    parser.add_argument("--players", action="store_true", help="List players with their auction status")
    parser.add_argument("--start", metavar="PLAYER_ID", help="Open bidding on a player")
    parser.add_argument("--bid", nargs=2, metavar=("TEAM_ID", "AMOUNT"), help="Place a bid")
    parser.add_argument("--advise", metavar="TEAM_ID", help="Fetch the bid recommendation for a team")
    parser.add_argument("--run-clock", action="store_true", help="Tick the clock until the current lot closes")
    parser.add_argument("--summary", metavar="TEAM_ID", help="Print a team's squad summary")
    parser.add_argument("--list-auctions", action="store_true", help="List recorded auctions and exit")
    parser.add_argument("--get-auction", metavar="AUCTION_ID", help="Fetch a recorded auction and exit")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.list_auctions or args.get_auction:
            if args.list_auctions:
                _print(client.get("/auctions"))
            if args.get_auction:
                resp = client.get(f"/auctions/{args.get_auction}")
                if resp.status_code == 404:
                    raise SystemExit(f"auction {args.get_auction} not found")
                _print(resp)
            return

        if args.players:
            _print(client.get("/players"))

        if args.start:
            resp = client.post("/auction/start", json={"player_id": args.start})
            if resp.status_code == 404:
                raise SystemExit(f"player {args.start} not found")
            _print(resp)

        if args.advise:
            resp = client.get(f"/auction/recommendation/{args.advise}")
            if resp.status_code == 404:
                raise SystemExit(f"team {args.advise} not found")
            _print(resp)

        if args.bid:
            team_id, amount = args.bid
            resp = client.post("/auction/bid", json={"team_id": team_id, "amount": int(amount)})
            resp.raise_for_status()
            payload = resp.json()
            if payload["accepted"]:
                print(f"Bid accepted: {team_id} {amount}")
            else:
                for violation in payload["violations"]:
                    print(f"Rejected ({violation['kind']}): {violation['message']}")

        if args.run_clock:
            state = client.get("/auction").json()
            while state["phase"] == "bidding":
                resp = client.post("/auction/tick")
                resp.raise_for_status()
                state = resp.json()
            print(state.get("message") or state["phase"])

        if args.summary:
            resp = client.get(f"/teams/{args.summary}/summary")
            if resp.status_code == 404:
                raise SystemExit(f"team {args.summary} not found")
            _print(resp)

        if args.state:
            _print(client.get("/auction"))


if __name__ == "__main__":
    main()
