"""Application entry point for SoundMap backend server."""

from soundmap.app import App
from soundmap.config import Config
from soundmap.logging import setup_logging
from soundmap.web.runner import run_server


def main() -> None:
    config = Config()  # type: ignore[call-arg]
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
