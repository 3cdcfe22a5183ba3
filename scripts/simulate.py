"""
Storefront Simulation Script

Drives a running server the way the storefront and back office do: browse
the catalog, fill a cart, build the WhatsApp order link, then log in as
admin and shuffle category and banner order.
Run from project root: python scripts/simulate.py

Version: 1.0.0
"""

import asyncio
import sys
import os
import random
import time
import argparse
from datetime import datetime
from typing import Any

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from storefront.client import (
    CartEngine,
    Direction,
    ListReorderEngine,
    NoticeBoard,
    QueryCache,
    StorefrontAPIClient,
    StorefrontAPIError,
    StorefrontSession,
)
from storefront.services.cart_store import InMemoryKeyValueStore

# Configuration
API_BASE_URL = "http://localhost:8001"
NOTES = [None, None, "Extra cheese", "No onions", "Well done\nCut in half"]


# =============================================================================
# CUSTOMER FLOW
# =============================================================================

async def run_customer(api: StorefrontAPIClient, lines: int) -> dict[str, Any]:
    """Browse, fill the cart and check out; the opener only records the link."""
    cart = CartEngine(InMemoryKeyValueStore())
    session = StorefrontSession(api, cart)
    await session.load()

    print(f"\n🍔 {session.settings.restaurant_name}")
    for category in session.categories:
        items = session.visible_items(category.id)
        print(f"   {category.name}: {len(items)} items")

    orderable = [item for item in session.visible_items() if item.is_available]
    if not orderable:
        print("   ⚠️ Nothing orderable on the menu")
        return {"success": False, "error": "empty menu"}

    for _ in range(lines):
        detail = session.open_item(random.choice(orderable))
        detail.set_quantity(random.randint(1, 3))
        detail.note = random.choice(NOTES) or ""
        detail.confirm()

    print(f"\n🛒 Cart: {session.cart_count} items, subtotal {session.price_label(cart.subtotal)}")

    opened: list[str] = []
    checkout = session.checkout(opener=opened.append)
    if not checkout.enter():
        return {"success": False, "error": "cart empty at checkout"}

    print("\n📝 Order message:")
    print(checkout.order_message())

    if not session.settings.can_take_orders:
        print("\n⚠️ No WhatsApp number configured; skipping send")
        return {"success": False, "error": "no whatsapp number"}

    link = checkout.send_order()
    print(f"\n🔗 {link[:100]}...")
    print(f"   Cart after send: {len(cart)} lines, redirected: {checkout.redirected}")
    return {"success": bool(opened) and cart.is_empty, "link": link}


# =============================================================================
# ADMIN FLOW
# =============================================================================

async def run_reorders(
    api: StorefrontAPIClient,
    collection: str,
    moves: int,
) -> dict[str, Any]:
    """Random up/down moves against one collection, measuring each round trip."""
    notices = NoticeBoard()
    engine = ListReorderEngine(api, collection, cache=QueryCache(), notices=notices)
    items = await engine.load()
    if len(items) < 2:
        print(f"   ⚠️ Not enough {collection} to reorder")
        return {"collection": collection, "accepted": 0, "refused": 0, "times": []}

    accepted = refused = 0
    times = []
    for _ in range(moves):
        index = random.randrange(len(engine.items))
        direction = random.choice(list(Direction))
        start_time = time.time()
        if await engine.move(index, direction):
            accepted += 1
            times.append(round(time.time() - start_time, 3))
        else:
            refused += 1

    labels = [getattr(entry, "name", None) or entry.image_url for entry in engine.items]
    print(f"   {collection}: {' > '.join(labels)}")
    for notice in notices.notices:
        if notice.level.value == "error":
            print(f"   ❌ {notice.title}: {notice.description}")

    return {"collection": collection, "accepted": accepted, "refused": refused, "times": times}


async def test_concurrent_moves(api: StorefrontAPIClient) -> bool:
    """Two simultaneous moves on one engine: the second must be refused."""
    engine = ListReorderEngine(api, "categories")
    items = await engine.load()
    if len(items) < 2:
        return True
    results = await asyncio.gather(
        engine.move(0, Direction.DOWN),
        engine.move(1, Direction.UP),
    )
    print(f"   Concurrent moves: {results}")
    return results.count(True) <= 1


# =============================================================================
# MAIN SIMULATION RUNNER
# =============================================================================

async def run_simulation(
    base_url: str,
    username: str,
    password: str,
    lines: int,
    moves: int,
) -> bool:
    print("=" * 70)
    print("🧪 STOREFRONT SIMULATION")
    print("=" * 70)
    print(f"🎯 Target: {base_url}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    async with StorefrontAPIClient(base_url) as api:
        print("\n1️⃣ Customer checkout...")
        try:
            customer = await run_customer(api, lines)
        except StorefrontAPIError as e:
            print(f"   ❌ Failed: {e}")
            return False
        print(f"   {'✅' if customer['success'] else '⚠️'} Checkout: {customer.get('error', 'sent')}")

        print("\n2️⃣ Admin login...")
        try:
            user = await api.login(username, password)
        except StorefrontAPIError as e:
            print(f"   ❌ Failed: {e}")
            return False
        print(f"   ✅ Logged in as {user.username}")

        print("\n3️⃣ Reordering...")
        results = [await run_reorders(api, collection, moves) for collection in ("categories", "banners")]

        print("\n4️⃣ Concurrent move guard...")
        guarded = await test_concurrent_moves(api)
        print(f"   {'✅' if guarded else '❌'} At most one move accepted")

        await api.logout()

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)
    for result in results:
        times = result["times"]
        print(f"\n📋 {result['collection']}: {result['accepted']} accepted, {result['refused']} refused")
        if times:
            print(f"   Average Response: {round(sum(times) / len(times), 3)}s")
            print(f"   Fastest: {min(times)}s")
            print(f"   Slowest: {max(times)}s")
    print("=" * 70)

    return customer["success"] and guarded


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Storefront Simulation Script")
    parser.add_argument("--base-url", default=API_BASE_URL, help="Server base URL")
    parser.add_argument("--username", default="admin", help="Admin username")
    parser.add_argument("--password", default=os.getenv("ADMIN_PASSWORD", "admin123"), help="Admin password")
    parser.add_argument("--lines", type=int, default=3, help="Cart lines to add")
    parser.add_argument("--moves", type=int, default=10, help="Reorder moves per collection")
    args = parser.parse_args()

    ok = asyncio.run(run_simulation(args.base_url, args.username, args.password, args.lines, args.moves))
    sys.exit(0 if ok else 1)
