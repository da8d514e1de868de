"""maxchat entry point."""

import logging

import uvicorn
from dotenv import find_dotenv, load_dotenv

from .config import Settings


def main() -> None:
    """Main entry point."""
    load_dotenv(find_dotenv(usecwd=True))
    logging.basicConfig(
        level=logging.INFO,
        format="[%(asctime)s] %(levelname)s %(name)s - %(message)s",
    )

    settings = Settings.from_env()
    uvicorn.run(
        "maxchat.server:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
