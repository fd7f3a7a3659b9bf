"""
Bridge host - JSON-lines method channel over stdio

One request per input line:
    {"id": 1, "method": "playSystemAlarm", "arguments": {}}
One response per output line:
    {"id": 1, "status": "success", "result": true}

Logs go to stderr (config.LOG_OUTPUTS) so stdout only carries responses.
The controller is torn down on EOF, SIGINT and SIGTERM.

Usage:
    fireguard-bridge [--debug]
    fireguard-bridge --list-devices
"""

import argparse
import json
import sys

import config
from fireguard.cleanup_context import alarm_controller
from fireguard.logging_utils import enable_debug_logging, setup_logger, log_info
from fireguard.method_channel import BAD_REQUEST_CODE, AlarmAudioChannel, MethodResult

logger = setup_logger(__name__)


def handle_line(channel: AlarmAudioChannel, line: str) -> str:
    """Decode one request line, dispatch it, encode the response"""
    try:
        message = json.loads(line)
    except json.JSONDecodeError as e:
        response = MethodResult.error(BAD_REQUEST_CODE, "Malformed request", str(e)).to_dict()
    else:
        if isinstance(message, dict):
            response = channel.handle_message(message)
        else:
            response = MethodResult.error(BAD_REQUEST_CODE, "Malformed request", "request must be an object").to_dict()
    return json.dumps(response, ensure_ascii=False)


def serve(channel: AlarmAudioChannel, stdin=None, stdout=None) -> int:
    """
    Serve requests until EOF.

    Returns:
        Number of requests handled
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    handled = 0
    for line in stdin:
        line = line.strip()
        if not line:
            continue
        stdout.write(handle_line(channel, line) + "\n")
        stdout.flush()
        handled += 1
    return handled


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Fireguard alarm audio bridge (JSON lines over stdio)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--list-devices", action="store_true", help="List PyAudio output devices and exit")
    args = parser.parse_args(argv)

    if args.debug:
        enable_debug_logging()

    if args.list_devices:
        from fireguard.audio_devices import list_output_devices
        for info in list_output_devices():
            print(f"{info.get('index')}: {info.get('name')}")
        return 0

    with alarm_controller(handle_signals=True, debug=args.debug) as controller:
        channel = AlarmAudioChannel(controller, name=config.ALARM_CHANNEL, debug=args.debug)
        log_info(logger, f"Serving {channel.name}: {', '.join(channel.methods)}")
        handled = serve(channel)
        log_info(logger, f"Input closed after {handled} request(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
