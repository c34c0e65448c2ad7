"""Process entrypoint: serve the services named in STOREFRONT_SERVICES."""

from __future__ import annotations

import uvicorn

from storefront.api.api_config import get_api_config


def main() -> None:
    config = get_api_config()
    uvicorn.run("storefront.api.app:app", host=config.host, port=config.port)


if __name__ == "__main__":
    main()
