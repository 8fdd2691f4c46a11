"""
Seed the sample users and applications into the configured store
(STORE_BACKEND=redis for anything that should outlive this process).
Idempotent: accounts that already exist are skipped.
"""
import os

from portal.core.demo_data import seed_demo_data
from portal.store.factory import build_registries

BACKEND = os.getenv("STORE_BACKEND", "redis")


def main():
    registries = build_registries(BACKEND)
    counts = seed_demo_data(registries.applications, registries.users)
    print(f"OK: seeded {counts['users']} users and {counts['applications']} applications into {BACKEND}")
    return counts

if __name__ == "__main__":
    main()
