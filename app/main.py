import argparse
import logging

from nicegui import app as ng_app
from nicegui import ui

from app.common import logging_config
from app.common.logging_config import TRACE, configure_logging
from app.constants import (
    DEVICE_URL,
    LOG_LEVEL,
    SERVER_HOST,
    SERVER_PORT,
    SIMULATE,
)
from app.pages.control import ControlPage
from app.services.device_client import client
from app.services.simulated_device import SimulatedDevice, build_router

# Runtime configuration (resolved later from CLI/env)
RUNTIME_SERVER_HOST = SERVER_HOST
RUNTIME_SERVER_PORT = SERVER_PORT
RUNTIME_DEVICE_URL = DEVICE_URL
RUNTIME_SIMULATE = SIMULATE

simulated_device: SimulatedDevice | None = None


def enable_simulator(server_port: int) -> SimulatedDevice:
    """Serve the simulated device from this server and point the client at it."""
    global simulated_device
    simulated_device = SimulatedDevice()
    ng_app.include_router(build_router(simulated_device))
    client.base_url = f"http://127.0.0.1:{server_port}"
    logging.info("Simulated device enabled at %s/api", client.base_url)
    return simulated_device


@ui.page("/")
def index() -> None:
    ui.query(".nicegui-content").classes("p-0")
    with ui.header().classes("items-center justify-between px-4 py-2"):
        ui.label("Servo Commander").classes("text-lg font-medium")
        ui.label(client.base_url).classes("text-xs")
    ControlPage(client).build()


ng_app.on_shutdown(client.aclose)


if __name__ in {"__main__", "__mp_main__"}:
    # CLI: web bind, device target, and log level
    parser = argparse.ArgumentParser(description="Servo NiceGUI Webserver")
    parser.add_argument("--host", default=SERVER_HOST, help="Webserver bind host")
    parser.add_argument(
        "--port", type=int, default=SERVER_PORT, help="Webserver bind port"
    )
    parser.add_argument(
        "--device-url",
        default=DEVICE_URL,
        help="Base URL of the servo unit, e.g. http://192.168.4.1",
    )
    parser.add_argument(
        "--simulate",
        action="store_true",
        default=SIMULATE,
        help="Serve a simulated device from this server (overrides --device-url)",
    )
    parser.add_argument(
        "--log-level",
        choices=["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set log level",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity; -v=INFO, -vv=DEBUG",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Enable WARNING logging"
    )
    args, _ = parser.parse_known_args()

    RUNTIME_SERVER_HOST = args.host
    RUNTIME_SERVER_PORT = int(args.port)
    RUNTIME_DEVICE_URL = args.device_url.rstrip("/")
    RUNTIME_SIMULATE = bool(args.simulate)

    # Resolve log level priority: explicit --log-level > -v/-q > env default from constants
    if args.log_level:
        if args.log_level == "TRACE":
            logging_config.TRACE_ENABLED = True
            RUNTIME_LOG_LEVEL = TRACE
        else:
            RUNTIME_LOG_LEVEL = getattr(logging, args.log_level)
    elif args.verbose >= 3:
        logging_config.TRACE_ENABLED = True
        RUNTIME_LOG_LEVEL = TRACE
    elif args.verbose >= 2:
        RUNTIME_LOG_LEVEL = logging.DEBUG
    elif args.verbose == 1:
        RUNTIME_LOG_LEVEL = logging.INFO
    elif args.quiet:
        RUNTIME_LOG_LEVEL = logging.WARNING
    else:
        RUNTIME_LOG_LEVEL = LOG_LEVEL

    configure_logging(RUNTIME_LOG_LEVEL)

    client.base_url = RUNTIME_DEVICE_URL
    if RUNTIME_SIMULATE:
        enable_simulator(RUNTIME_SERVER_PORT)

    logging.info(
        f"Webserver bind: host={RUNTIME_SERVER_HOST} port={RUNTIME_SERVER_PORT}"
    )
    logging.info(f"Device target: {client.base_url}")

    ui.run(
        title="Servo Commander",
        host=RUNTIME_SERVER_HOST,
        port=RUNTIME_SERVER_PORT,
        reload=False,
        show=False,
    )
