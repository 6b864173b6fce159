import asyncio
import json
import sys
import signal
import logging
from pathlib import Path
from typing import Optional

from .control import CommandDispatcher
from .errors import PortBindError
from .server import LiveReloadServer, ServerConstants
from .workspace import WorkspaceProvisioner


# Configure logging
logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

USAGE = """\
Usage: charts-live [PATH] [OPTIONS]

Modes:
  --mode=mcp        - Run the MCP tool server on stdio (default)
  --mode=serve      - Serve PATH with live reload until interrupted
  --mode=libs       - Print the supported chart libraries

Server Options:
  --host=HOST       - HTTP host (default: localhost)
  --port=PORT       - HTTP port (default: 3000)
  --workspaces=DIR  - Directory new workspaces are created in (default: ./workspaces)

Logging Options:
  --log-file=PATH   - Log to file (default: console only)
  --log-level=LEVEL - Logging level: DEBUG, INFO, WARNING, ERROR (default: INFO)
"""


def setup_logging(log_file: Path = None, level: str = "INFO", stream=None):
    """
    Configure logging to both file and console.

    Console output goes to stderr by default because stdout carries the
    MCP protocol.

    Args:
        log_file: Path to log file (optional)
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        stream: Console stream
    """
    # Create formatters
    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    simple_formatter = logging.Formatter(
        '%(levelname)s: %(message)s'
    )

    # Root logger configuration
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Clear existing handlers
    root_logger.handlers = []

    # Console handler (simple format)
    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setLevel(getattr(logging, level.upper()))
    console_handler.setFormatter(simple_formatter)
    root_logger.addHandler(console_handler)

    # File handler (detailed format)
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode='a')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")

    return root_logger


async def run_serve(path: Path, host: str, port: int):
    """Serve a directory with live reload until SIGINT/SIGTERM."""
    server = LiveReloadServer(host=host, port=port)

    try:
        await server.start(path)
    except PortBindError as e:
        logger.error(str(e))
        return 1

    print(f"\nServer started on {server.url}", file=sys.stderr)
    print(f"Serving workspace: {server.state.workspace}", file=sys.stderr)
    print(f"\nOpen {server.url} in your browser to view the chart!\n", file=sys.stderr)

    # Set up graceful shutdown
    stop_event = asyncio.Event()

    def signal_handler():
        print("\nShutting down...", file=sys.stderr)
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, signal_handler)

    # Wait for stop signal
    await stop_event.wait()

    await server.stop()
    print("Server stopped.", file=sys.stderr)
    return 0


async def run_mcp(host: str, port: int, workspaces: Path):
    """Run the MCP tool server on stdio."""
    # Imported here so the other modes work without the MCP SDK loaded
    from .control.mcp_server import run_stdio

    server = LiveReloadServer(host=host, port=port)
    provisioner = WorkspaceProvisioner(workspaces, server_url=server.url)
    dispatcher = CommandDispatcher(provisioner, server)

    await run_stdio(dispatcher)
    return 0


def main(argv: Optional[list] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv

    if "-h" in argv or "--help" in argv:
        print(USAGE)
        return 0

    path: Optional[Path] = None
    mode = "mcp"
    host = ServerConstants.DEFAULT_HOST
    port = ServerConstants.DEFAULT_PORT
    workspaces = Path.cwd() / "workspaces"
    log_file = None
    log_level = "INFO"

    # Parse arguments
    for arg in argv:
        if arg.startswith("--mode="):
            mode = arg.split("=", 1)[1]
        elif arg.startswith("--host="):
            host = arg.split("=", 1)[1]
        elif arg.startswith("--port="):
            value = arg.split("=", 1)[1]
            if not value.isdigit() or int(value) > 65535:
                print(f"Invalid port: {value}\n", file=sys.stderr)
                print(USAGE, file=sys.stderr)
                return 2
            port = int(value)
        elif arg.startswith("--workspaces="):
            workspaces = Path(arg.split("=", 1)[1])
        elif arg.startswith("--log-file="):
            log_file = Path(arg.split("=", 1)[1])
        elif arg.startswith("--log-level="):
            log_level = arg.split("=", 1)[1]
            if log_level.upper() not in LOG_LEVELS:
                print(f"Invalid log level: {log_level}\n", file=sys.stderr)
                print(USAGE, file=sys.stderr)
                return 2
        elif arg.startswith("--"):
            print(f"Unknown option: {arg}\n", file=sys.stderr)
            print(USAGE, file=sys.stderr)
            return 2
        else:
            path = Path(arg)

    # Setup logging
    setup_logging(log_file=log_file, level=log_level)

    if mode == "serve":
        if path is None:
            print("serve mode needs a PATH to serve\n", file=sys.stderr)
            print(USAGE, file=sys.stderr)
            return 2
        try:
            return asyncio.run(run_serve(path, host, port))
        except KeyboardInterrupt:
            print("\nShutdown complete.", file=sys.stderr)
            return 0
    elif mode == "libs":
        provisioner = WorkspaceProvisioner(workspaces)
        print(json.dumps(provisioner.list_supported(), indent=2))
        return 0
    elif mode == "mcp":
        try:
            return asyncio.run(run_mcp(host, port, workspaces))
        except KeyboardInterrupt:
            return 0
    else:
        print(f"Unknown mode: {mode}\n", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
