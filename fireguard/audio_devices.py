import pyaudio

from fireguard.logging_utils import setup_logger

logger = setup_logger(__name__)


def find_output_device_index(name_substring, pa=None):
    """
    Find a PyAudio output device whose name contains name_substring.

    Args:
        name_substring: Case-insensitive device name fragment
        pa: Optional open PyAudio instance (a temporary one is used otherwise)

    Returns:
        Device index or None (use the default output device)
    """
    if not name_substring:
        return None
    p = pa or pyaudio.PyAudio()
    try:
        count = p.get_device_count()
        for i in range(count):
            info = p.get_device_info_by_index(i)
            if int(info.get("maxOutputChannels", 0)) > 0:
                name = info.get("name", "")
                if name_substring.lower() in name.lower():
                    return i
    finally:
        if pa is None:
            p.terminate()
    logger.warning(f"Output device '{name_substring}' not found, using default output")
    return None


def list_output_devices():
    p = pyaudio.PyAudio()
    try:
        devices = [p.get_device_info_by_index(i) for i in range(p.get_device_count())]
        return [d for d in devices if int(d.get("maxOutputChannels", 0)) > 0]
    finally:
        p.terminate()
