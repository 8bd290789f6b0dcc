"""Run the API with uvicorn: `python -m jodjod_api` or the `jodjod-api` script"""

import uvicorn

from jodjod_api.config import settings


def main() -> None:
    uvicorn.run(
        "jodjod_api.api.main:create_app",
        host=settings.server_host,
        port=settings.server_port,
        factory=True,
        log_config=None,
    )


if __name__ == "__main__":
    main()
