#!/usr/bin/env python3
"""
Demo script for pet matching.

Ranks the sample catalog from scripts/seed.json for two users, using the
scoring oracle configured in the environment (ORACLE_PROVIDER, OPENAI_API_KEY
or OLLAMA_BASE_URL). Without a reachable oracle every score falls back to 50.
"""

import asyncio
import time
from pathlib import Path

from pet_match.api.dependencies import build_oracle
from pet_match.config import configure_logging
from pet_match.entities import RankedList
from pet_match.repositories import InMemoryScoreStore, load_seed_file
from pet_match.services import MatchAssembler

SEED_FILE = Path(__file__).with_name("seed.json")


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def print_ranked(ranked: RankedList) -> None:
    mode = " (neutral, no preferences)" if ranked.neutral else ""
    print(f"\n  Ranked list for {ranked.user_id}{mode}:")
    for position, pet in enumerate(ranked.pets, 1):
        print(f"  {position}. {pet.name:<8} {pet.species.value:<6} {pet.size.value:<7} score {pet.match_score:5.1f}")


async def timed(label: str, coro):
    start = time.time()
    result = await coro
    print(f"\n  ⏱  {label}: {(time.time() - start) * 1000:.0f}ms")
    return result


async def main() -> None:
    configure_logging("WARNING")
    catalog, profiles = load_seed_file(SEED_FILE)
    oracle = build_oracle()
    assembler = MatchAssembler.create(
        catalog_store=catalog,
        profile_store=profiles,
        oracle=oracle,
        score_store=InMemoryScoreStore(),
    )

    try:
        print_section("First load (every pet scored)")
        print(f"\n  Oracle model: {oracle.model_name}")
        ranked = await timed("first load", assembler.get_ranked_list("demo-user"))
        print_ranked(ranked)

        print_section("Refresh (valid scores served from cache)")
        ranked = await timed("refresh", assembler.refresh("demo-user"))
        print_ranked(ranked)

        print_section("Preference edit (cached scores become stale)")
        document = await profiles.get_profile("demo-user")
        preferences = dict(document["buyerPreferences"], petTypes=["CAT", "RABBIT"], sizePreferences=["small"])
        profiles.set_preferences("demo-user", preferences)
        print("\n  📝 demo-user now prefers small cats and rabbits")
        ranked = await timed("reload after edit", assembler.get_ranked_list("demo-user"))
        print_ranked(ranked)

        print_section("User without preferences")
        ranked = await timed("neutral load", assembler.get_ranked_list("new-user"))
        print_ranked(ranked)

        print_section("Metrics")
        for name, value in assembler.metrics.to_dict().items():
            print(f"  {name}: {value:.2f}" if isinstance(value, float) else f"  {name}: {value}")
    finally:
        await assembler.close()
        await oracle.close()


if __name__ == "__main__":
    asyncio.run(main())
