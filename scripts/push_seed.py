from pathlib import Path
import os
import sys

# Ensure repo root is on sys.path and is the working directory.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
os.chdir(ROOT)

from plsim.logging import setup_logging
from plsim.pipeline.store import SeedDefaults, StoreClient


def main(force: bool):
    setup_logging()
    client = StoreClient()
    current = client.load()
    if current.source == "remote" and not force:
        print(f"Store already holds {len(current.records)} months; pass --force to overwrite.")
        raise SystemExit(1)
    if current.warning and not force:
        print("Store did not load cleanly:", current.warning)
        print("Pass --force to overwrite it with seed data anyway.")
        raise SystemExit(1)
    records = SeedDefaults().build()
    result = client.save(records)
    if not result.ok:
        print("Save failed:", result.error)
        raise SystemExit(1)
    print(f"Wrote {len(records)} seed months | sha256 {result.payload_sha256}")


if __name__ == '__main__':
    main(force="--force" in sys.argv[1:])
