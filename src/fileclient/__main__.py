import sys
import argparse
import asyncio

from fileclient.config.config import load_config
from fileclient.exceptions import StartupError
from fileclient.logging.diagnostic import configure_logging
from fileclient.sandbox.factory import create_backend
from fileclient.session import Session
from fileclient.shell import run_interactive


async def async_main(argv=None):
    parser = argparse.ArgumentParser(
        prog="fileclient",
        description="File Client Tool: browse a storage tree confined to a root directory",
    )
    parser.add_argument("root", nargs="?", default=None, help="Root directory to confine the session to")
    args = parser.parse_args(argv)

    config = load_config()
    configure_logging(config.log_level)
    root = args.root if args.root is not None else config.root_directory

    sys.stderr.write("Starting File Client...\n")
    sys.stderr.write(f"Root directory: {root}\n")
    sys.stderr.write("-" * 40 + "\n")

    backend = create_backend(config.backend, root, create_missing=config.create_missing_root)
    try:
        await run_interactive(Session(backend, config))
    finally:
        backend.close()


def main(argv=None):
    # Not asyncio.run: its SIGINT handler only cancels the task and cannot
    # interrupt a read blocked at the prompt.
    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(async_main(argv))
    except StartupError as e:
        sys.stderr.write(f"Fatal Error: {e}\n")
        sys.stderr.write("Usage: fileclient [root_directory]\n")
        sys.stderr.write("Example: fileclient /mysql/data\n")
        sys.exit(1)
    except KeyboardInterrupt:
        sys.stderr.write("\n")
        sys.exit(1)
    except Exception as e:
        sys.stderr.write(f"Fatal: {e}\n")
        sys.exit(1)
    finally:
        loop.close()

if __name__ == "__main__":
    main()
