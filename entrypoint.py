"""Server entrypoint. Starts uvicorn with host and port from settings."""
import uvicorn

# Pass the app object so uvicorn runs it without re-importing the module by name.
from stockfolio.config.settings import get_settings
from stockfolio.main import app


def main() -> None:
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
