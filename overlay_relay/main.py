import uvicorn
from fastapi import FastAPI

from overlay_relay.config import RelayConfig
from overlay_relay.container import RelayContainer
from overlay_relay.relay_app import create_app


def create_application() -> tuple[FastAPI, RelayConfig]:
    """
    Create the FastAPI application and the associated configuration.

    Returns:
        Tuple containing the FastAPI application and the configuration
    """
    container = RelayContainer()
    app = create_app(container)
    return app, container.config()


app, app_config = create_application()


def run_application() -> None:
    """Run the FastAPI application with uvicorn."""
    server = app_config.server
    environment = str(server.environment).lower()

    uvicorn.run(
        "overlay_relay.main:app",
        host=server.host,
        port=server.port,
        log_level=app_config.logging.level.lower(),
        access_log=environment == "development",
        reload=environment == "development",
    )


if __name__ == "__main__":
    run_application()
