"""
Method Channel - request/response boundary for the application shell

Maps method names to AlarmSoundController operations and converts platform
exceptions into result objects. Nothing raised by the controller escapes
handle().

    setAlarmStream  -> ensure_alarm_volume()
    playSystemAlarm -> play_alarm_loop()
    stopAlarmSound  -> stop_alarm_loop()
    anything else   -> not implemented
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import config
from fireguard.alarm_sound_controller import AlarmSoundController
from fireguard.base_module import BaseModule
from fireguard.exceptions import AlarmAudioError
from fireguard.logging_utils import log_debug, log_error

METHOD_SET_ALARM_STREAM = "setAlarmStream"
METHOD_PLAY_SYSTEM_ALARM = "playSystemAlarm"
METHOD_STOP_ALARM_SOUND = "stopAlarmSound"

ERROR_CODE = "ERROR"
BAD_REQUEST_CODE = "BAD_REQUEST"

STATUS_SUCCESS = "success"
STATUS_ERROR = "error"
STATUS_NOT_IMPLEMENTED = "not_implemented"


@dataclass(frozen=True)
class MethodCall:
    method: str
    arguments: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "MethodCall":
        method = data.get("method")
        if not isinstance(method, str) or not method:
            raise ValueError("request is missing a 'method' string")
        arguments = data.get("arguments") or {}
        if not isinstance(arguments, dict):
            raise ValueError("'arguments' must be an object")
        return MethodCall(method=method, arguments=arguments)


@dataclass(frozen=True)
class MethodResult:
    """Outcome of one method call"""
    status: str
    value: Any = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    error_details: Optional[str] = None

    @staticmethod
    def success(value: Any = True) -> "MethodResult":
        return MethodResult(status=STATUS_SUCCESS, value=value)

    @staticmethod
    def error(code: str, message: str, details: Optional[str] = None) -> "MethodResult":
        return MethodResult(status=STATUS_ERROR, error_code=code, error_message=message, error_details=details)

    @staticmethod
    def not_implemented() -> "MethodResult":
        return MethodResult(status=STATUS_NOT_IMPLEMENTED)

    @property
    def ok(self) -> bool:
        return self.status == STATUS_SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        if self.status == STATUS_SUCCESS:
            return {"status": self.status, "result": self.value}
        if self.status == STATUS_ERROR:
            return {
                "status": self.status,
                "code": self.error_code,
                "message": self.error_message,
                "details": self.error_details,
            }
        return {"status": self.status}


class AlarmAudioChannel(BaseModule):
    """Dispatches channel method calls to the alarm controller"""

    def __init__(self, controller: AlarmSoundController, name: str = None, debug: bool = False):
        super().__init__(__name__, debug=debug)
        self.name = name or config.ALARM_CHANNEL
        self.controller = controller
        # method -> (operation, failure message)
        self._handlers: Dict[str, tuple] = {
            METHOD_SET_ALARM_STREAM: (controller.ensure_alarm_volume, "Failed to set alarm stream"),
            METHOD_PLAY_SYSTEM_ALARM: (controller.play_alarm_loop, "Failed to play alarm"),
            METHOD_STOP_ALARM_SOUND: (controller.stop_alarm_loop, "Failed to stop alarm"),
        }

    @property
    def methods(self):
        return sorted(self._handlers)

    def handle(self, call: MethodCall) -> MethodResult:
        entry = self._handlers.get(call.method)
        if entry is None:
            log_debug(self.logger, f"[{self.name}] not implemented: {call.method}")
            return MethodResult.not_implemented()

        operation, failure_message = entry
        log_debug(self.logger, f"[{self.name}] {call.method}")
        try:
            operation()
        except AlarmAudioError as e:
            log_error(self.logger, f"{failure_message}: {e.platform_message}")
            return MethodResult.error(ERROR_CODE, failure_message, e.platform_message)
        except Exception as e:
            log_error(self.logger, f"{failure_message}: {type(e).__name__}: {e}")
            return MethodResult.error(ERROR_CODE, failure_message, str(e))
        return MethodResult.success(True)

    def handle_message(self, message: Dict[str, Any]) -> Dict[str, Any]:
        """Handle a decoded JSON request envelope and return the response envelope"""
        try:
            call = MethodCall.from_dict(message)
        except (ValueError, AttributeError) as e:
            return MethodResult.error(BAD_REQUEST_CODE, "Malformed request", str(e)).to_dict()
        response = self.handle(call).to_dict()
        if "id" in message:
            response["id"] = message["id"]
        return response
