"""
Teardown guarantees for the alarm controller

Provides a registry + signal handling so a playing alarm is always released
when the host process goes away, plus a context manager for scripts.

Usage:

    # Simple usage (auto teardown)
    with alarm_controller() as controller:
        controller.play_alarm_loop()
        ...
    # Teardown happens automatically!

    # Long-running host
    with alarm_controller(handle_signals=True) as controller:
        serve(controller)
    # Ctrl+C / SIGTERM stop the alarm before exiting
"""

import atexit
import os
import signal
from contextlib import contextmanager

from fireguard.logging_utils import setup_logger, log_info, log_warning

logger = setup_logger(__name__)


class CleanupRegistry:
    """
    Global registry for cleanup handlers.
    Ensures cleanup even if context manager fails.
    """
    _handlers = []
    _signal_handlers_installed = False

    @classmethod
    def register(cls, cleanup_func):
        """Register a cleanup function"""
        if cleanup_func not in cls._handlers:
            cls._handlers.append(cleanup_func)

    @classmethod
    def unregister(cls, cleanup_func):
        """Unregister a cleanup function"""
        if cleanup_func in cls._handlers:
            cls._handlers.remove(cleanup_func)

    @classmethod
    def cleanup_all(cls):
        """Run all registered cleanup handlers (most recent first)"""
        for handler in list(reversed(cls._handlers)):
            try:
                handler()
            except Exception as e:
                log_warning(logger, f"Cleanup handler error: {e}")

    @classmethod
    def install_signal_handlers(cls):
        """Install global signal handlers for cleanup"""
        if cls._signal_handlers_installed:
            return

        def signal_handler(signum, frame):
            log_info(logger, f"Received signal {signum}, cleaning up...")
            cls.cleanup_all()
            os._exit(128 + signum)

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

        # Register atexit handler (for normal exit)
        atexit.register(cls.cleanup_all)

        cls._signal_handlers_installed = True


@contextmanager
def alarm_controller(handle_signals: bool = False, debug: bool = False, controller=None):
    """
    Context manager yielding an AlarmSoundController that is torn down on exit.

    Args:
        handle_signals: Install SIGINT/SIGTERM + atexit teardown handlers
        debug: Enable debug logging
        controller: Existing controller (default: production controller from factory)
    """
    if controller is None:
        from fireguard.factory import create_alarm_sound_controller
        controller = create_alarm_sound_controller(debug=debug)

    CleanupRegistry.register(controller.teardown)
    if handle_signals:
        CleanupRegistry.install_signal_handlers()
    try:
        yield controller
    finally:
        controller.teardown()
        CleanupRegistry.unregister(controller.teardown)
