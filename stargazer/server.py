#!/usr/bin/env python3
"""
Stargazer server entrypoint for `python -m stargazer.server`.

For uvicorn use: uvicorn stargazer.app:create_app --factory
"""

import uvicorn

from .app import create_app
from .config import get_config


def main() -> None:
    config = get_config()
    uvicorn.run(create_app(), host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
