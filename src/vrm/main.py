"""Log in to VRM and print the user's profile and installations."""

import asyncio
import logging
import logging.handlers
import sys
from pathlib import Path

from vrm import connect
from vrm.config import load_config
from vrm.errors import VRMError

log = logging.getLogger("victron-vrm")


def setup_logging(config: dict) -> None:
    """Configure root logger with a console handler and optional rotating file."""
    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    level = getattr(logging, config["log_level"].upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)

    console = logging.StreamHandler()
    console.setFormatter(fmt)
    root.addHandler(console)

    if config.get("log_dir"):
        log_dir = Path(config["log_dir"])
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / "vrm.log",
            maxBytes=1_000_000,
            backupCount=3,
        )
        file_handler.setFormatter(fmt)
        root.addHandler(file_handler)


async def run(config: dict) -> None:
    client = await connect(config)
    async with client:
        user = await client.get_user_info()
        print(f"User: {user.name} <{user.email}> ({user.country}), id {user.id}")

        installations = await client.get_all_installations_or_sites(config["vrm_extended"])
        for site in installations:
            print(f"  [{site.site_id}] {site.name}: {site.num_alarms or 0} alarm(s)")
        log.info("Listed %d installation(s)", len(installations))


def main():
    config = load_config()
    setup_logging(config)
    log.info("Connecting to VRM in %s mode", config["vrm_mode"])

    try:
        asyncio.run(run(config))
    except VRMError as err:
        log.error("VRM request failed: %s", err)
        sys.exit(1)


if __name__ == "__main__":
    main()
