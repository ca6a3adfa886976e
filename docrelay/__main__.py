"""Run the relay with uvicorn: ``python -m docrelay``."""
import logging

import click
import uvicorn

from docrelay.config import configure_settings


@click.command(name="docrelay")
@click.option("--host", "-H", default=None, help="Host address to bind (default: HOST or 0.0.0.0).")
@click.option("--port", "-p", type=int, default=None, help="Port to listen on (default: PORT or 3000).")
@click.option("--headed", is_flag=True, help="Show the browser window instead of running headless.")
@click.option("--log-level", default=None, help="Logging level (default: RELAY_LOG_LEVEL or INFO).")
def main(host, port, headed, log_level):
    """Start the document automation relay."""
    overrides = {}
    if host:
        overrides["host"] = host
    if port:
        overrides["port"] = port
    if headed:
        overrides["headless"] = False
    if log_level:
        overrides["log_level"] = log_level.upper()

    settings = configure_settings(**overrides)
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("docrelay.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
