import argparse
import asyncio
import random
import sys
import uuid
from datetime import date
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from distro_couple.config import GENDER_FEMALE, GENDER_MALE, POPULAR_DISTROS
from distro_couple.database import init_db
from distro_couple.repo import SqlInterestLedger, SqlProfileStore, reset_store
from distro_couple.schemas import Profile

FIRST_NAMES = {
    GENDER_MALE: ["Ahmet", "Mehmet", "Can", "Emre", "Burak", "Kerem", "Linus", "Deniz"],
    GENDER_FEMALE: ["Ayse", "Elif", "Zeynep", "Selin", "Ece", "Defne", "Ada", "Deniz"],
}


def build_profiles(n_users: int, rng: random.Random, distros: list[str]) -> list[Profile]:
    profiles: list[Profile] = []
    for _ in range(n_users):
        gender = rng.choice([GENDER_MALE, GENDER_FEMALE])
        profiles.append(
            Profile(
                id=str(uuid.UUID(int=rng.getrandbits(128))),
                name=rng.choice(FIRST_NAMES[gender]),
                gender=gender,
                os=rng.choice(distros),
                birth_date=date(rng.randint(1980, 2005), rng.randint(1, 12), rng.randint(1, 28)),
                bio=f"Daily driver: {rng.choice(distros)}",
            )
        )
    return profiles


async def seed(args: argparse.Namespace) -> dict[str, int]:
    await init_db()
    if args.reset:
        await reset_store()
    rng = random.Random(args.seed)
    distros = POPULAR_DISTROS[: args.distros] if args.distros > 0 else POPULAR_DISTROS
    profiles = build_profiles(args.n_users, rng, distros)

    store = SqlProfileStore()
    for profile in profiles:
        await store.save_profile(profile)

    ledger = SqlInterestLedger()
    likes = 0
    for profile in profiles:
        peers = [p for p in profiles if p.os == profile.os and p.gender != profile.gender]
        for peer in peers:
            if rng.random() < args.like_rate:
                await ledger.append_interest(profile.id, peer.id)
                likes += 1
    return {"profiles": len(profiles), "likes": likes}


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed dummy Distro Couple profiles and likes")
    parser.add_argument("--n-users", type=int, default=100)
    parser.add_argument("--distros", type=int, default=6, help="use only the first N catalog entries (0 = all)")
    parser.add_argument("--like-rate", type=float, default=0.3)
    parser.add_argument("--reset", action="store_true")
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    summary = asyncio.run(seed(args))

    print("Seed completed")
    for k, v in summary.items():
        print(f"- {k}: {v}")


if __name__ == "__main__":
    main()
