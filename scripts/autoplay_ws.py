#!/usr/bin/env python3
"""
Auto-play a few hands against a running table server over WebSocket.

Usage:
    python scripts/autoplay_ws.py [--hands 5] [--players 3]

The first bot joins under ADMIN_NAME (default "admin") and drives the table:
it starts hands, opens betting rounds and awards the pot to a random player
still in the hand.
"""
import argparse
import asyncio
import json
import os
import random
from typing import Optional

import httpx
import websockets

API_URL = os.getenv("TABLE_API_URL", "http://localhost:3000")
WS_URL = os.getenv("TABLE_WS_URL", "ws://localhost:3000/ws")
ADMIN_NAME = os.getenv("ADMIN_NAME", "admin")
STREETS_PER_HAND = 4


class Bot:
    def __init__(self, name: str):
        self.name = name
        self.ws = None
        self.state: Optional[dict] = None

    async def connect(self):
        """Connect and read the initial state."""
        self.ws = await websockets.connect(WS_URL)
        await self.recv()

    async def send(self, message: dict):
        """Send a message."""
        await self.ws.send(json.dumps(message))

    async def recv(self, timeout: float = 5.0) -> Optional[dict]:
        """Receive a message with timeout."""
        try:
            msg = await asyncio.wait_for(self.ws.recv(), timeout)
        except asyncio.TimeoutError:
            return None
        data = json.loads(msg)
        if data.get("type") == "state":
            self.state = data
        elif data.get("type") == "error":
            print(f"  [{self.name}] Error: {data.get('message')}")
        return data

    async def drain(self, timeout: float = 0.2):
        """Process all pending messages."""
        while await self.recv(timeout):
            pass

    @property
    def seat(self) -> Optional[int]:
        if not self.state:
            return None
        for index, player in enumerate(self.state["players"]):
            if player["name"] == self.name:
                return index
        return None

    def is_my_turn(self) -> bool:
        return self.state is not None and self.state["hand"]["turn_index"] == self.seat

    async def play_action(self) -> bool:
        """Play an action if it's our turn."""
        if not self.is_my_turn():
            return False

        hand = self.state["hand"]
        limit = self.state["config"]["bet_limit"]
        roll = random.random()

        if roll < 0.05:
            msg = {"type": "action_fold"}
            label = "FOLD"
        elif roll < 0.2:
            target = hand["current_bet"] + random.randint(1, limit)
            msg = {"type": "action_bet_raise", "target_total": target}
            label = f"RAISE TO {target}"
        else:
            msg = {"type": "action_check_call"}
            label = "CHECK/CALL"

        await self.send(msg)
        print(f"  {self.name}: {label}")
        return True


async def check_health() -> bool:
    """Make sure the server is up before opening sockets."""
    async with httpx.AsyncClient() as client:
        try:
            res = await client.get(f"{API_URL}/health")
        except httpx.HTTPError as e:
            print(f"  ✗ Server not reachable: {e}")
            return False
    return res.status_code == 200


async def drain_all(bots: list[Bot]):
    for bot in bots:
        await bot.drain()


async def play_hand(admin: Bot, bots: list[Bot]):
    """Start a hand and play it until the pot is awarded."""
    await admin.send({"type": "admin_start_hand"})
    await drain_all(bots)
    streets = 1

    while admin.state["hand"]["in_progress"]:
        hand = admin.state["hand"]

        if hand["turn_index"] is None:
            in_hand = [p for p in admin.state["players"] if p["in_hand"]]
            if hand["round_closed"] and len(in_hand) > 1 and streets < STREETS_PER_HAND:
                streets += 1
                print(f"  -- street {streets}, pot {hand['pot']} --")
                await admin.send({"type": "admin_next_round"})
            else:
                winner = random.choice(in_hand)
                print(f"  🏆 {winner['name']} wins {hand['pot']}")
                await admin.send({"type": "admin_end_hand", "winner_id": winner["id"]})
            await drain_all(bots)
            continue

        acted = False
        for bot in bots:
            if await bot.play_action():
                acted = True
                await drain_all(bots)
                break
        if not acted:
            await drain_all(bots)


async def main():
    parser = argparse.ArgumentParser(description="Auto-play hands over WebSocket")
    parser.add_argument("--hands", type=int, default=5)
    parser.add_argument("--players", type=int, default=3)
    args = parser.parse_args()

    print("=" * 50)
    print("Betting Table Auto-Play (WebSocket)")
    print("=" * 50)

    if not await check_health():
        return

    bots = [Bot(ADMIN_NAME)] + [Bot(f"bot{i}") for i in range(1, args.players)]
    admin = bots[0]

    print("\n--- Joining Table ---")
    for bot in bots:
        await bot.connect()
        await bot.send({"type": "join", "name": bot.name})
        await drain_all(bots)
        print(f"  ✓ {bot.name} joined")

    print("\n--- Playing Hands ---")
    for number in range(1, args.hands + 1):
        print(f"\n[Hand {number}]")
        await play_hand(admin, bots)

    print("\n" + "=" * 50)
    print(f"Completed {args.hands} hands!")
    print("=" * 50)
    for p in admin.state.get("players", []):
        print(f"  {p['name']}: {p['stack']}")

    for bot in bots:
        await bot.ws.close()


if __name__ == "__main__":
    asyncio.run(main())
