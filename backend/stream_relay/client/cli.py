"""
Command-line client: upload a video through the relay and follow its status
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from stream_relay.client.controller import ControllerState, UploadController
from stream_relay.client.display import render_result
from stream_relay.client.relay_client import RelayClient
from stream_relay.config.base import settings
from stream_relay.utils.logger import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stream-relay-client",
        description="Upload a video through the relay and wait until it is ready to stream.",
    )
    parser.add_argument("file", help="video file to upload")
    parser.add_argument("--relay-url", default=settings.RELAY_URL, help="relay base URL (default: %(default)s)")
    parser.add_argument(
        "--interval", type=float, default=settings.POLL_INTERVAL,
        help="seconds between status checks (default: %(default)s)",
    )
    parser.add_argument("--timeout", type=float, default=None, help="give up waiting after this many seconds")
    parser.add_argument("--log-level", default="WARNING")
    return parser


class MessagePrinter:
    """Prints the status message whenever it changes"""

    def __init__(self, out=None):
        self.out = out or sys.stdout
        self.last = None

    def __call__(self, controller: UploadController):
        message = controller.error or controller.message
        if controller.state == ControllerState.UPLOADING:
            message = "Uploading..."
        if message and message != self.last:
            print(message, file=self.out)
            self.last = message


async def run_upload(args, out=None) -> int:
    out = out or sys.stdout
    controller = UploadController(
        RelayClient(base_url=args.relay_url),
        poll_interval=args.interval,
        on_change=MessagePrinter(out),
    )
    controller.select_file(args.file)
    try:
        await controller.upload()
        state = await controller.wait_until_terminal(timeout=args.timeout)
    except asyncio.TimeoutError:
        print(f"Gave up after {args.timeout}s, video {controller.uid} is still processing", file=out)
        return 1
    finally:
        await controller.close()

    if controller.poll_error:
        print(f"Stopped checking status: {controller.poll_error}", file=out)
    for line in render_result(controller.result)[1:]:
        print(line, file=out)
    return 0 if state == ControllerState.READY else 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings.LOG_LEVEL = args.log_level
    setup_logging(level=args.log_level, log_file=settings.LOG_FILE or None)
    try:
        return asyncio.run(run_upload(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
