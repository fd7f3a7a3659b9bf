import os

# Project root directory (used for resource paths)
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))

# Method channel the application shell talks to
ALARM_CHANNEL = os.getenv('ALARM_CHANNEL', 'com.fireguard.alarm/audio')

# ============================================================================
# ALARM ROUTING
# ============================================================================
# The alarm category maps to a dedicated PulseAudio/PipeWire sink so the alarm
# stays audible when the desktop/default sink is muted.
#   ALARM_SINK          - pactl sink name nudged by setAlarmStream
#   ALARM_OUTPUT_DEVICE - PyAudio output device name substring (None = default)
#   ALARM_MEDIA_ROLE    - PulseAudio media.role tag for alarm streams
# ============================================================================

ALARM_SINK = os.getenv('ALARM_SINK', '@DEFAULT_SINK@')
ALARM_OUTPUT_DEVICE = os.getenv('ALARM_OUTPUT_DEVICE', None)
ALARM_MEDIA_ROLE = os.getenv('ALARM_MEDIA_ROLE', 'alarm')

# Volume nudge is only reliable on PulseAudio/PipeWire-pulse >= this version
MIN_PULSE_VERSION = os.getenv('MIN_PULSE_VERSION', '13.0')
FORCE_VOLUME_NUDGE = os.getenv('FORCE_VOLUME_NUDGE', '').lower()  # '', 'true' or 'false'
PACTL_TIMEOUT = float(os.getenv('PACTL_TIMEOUT', '1.0'))  # seconds per pactl call

# ============================================================================
# TONES
# ============================================================================
# Explicit paths win over the sound theme lookup.
ALARM_SOUND_PATH = os.getenv('ALARM_SOUND_PATH', '')
NOTIFICATION_SOUND_PATH = os.getenv('NOTIFICATION_SOUND_PATH', '')

SOUND_THEME_DIRS = [
    d for d in os.getenv(
        'SOUND_THEME_DIRS',
        f'{PROJECT_ROOT}/resources/sounds:'
        '/usr/share/sounds/freedesktop/stereo:'
        '/usr/local/share/sounds/freedesktop/stereo'
    ).split(':') if d
]

# freedesktop sound theme file names, in preference order
ALARM_TONE_NAMES = ['alarm-clock-elapsed.oga', 'alarm-clock-elapsed.ogg', 'alarm-clock-elapsed.wav']
NOTIFICATION_TONE_NAMES = ['message-new-instant.oga', 'message.oga', 'bell.oga', 'complete.oga']

# Playback
PLAYBACK_FRAMES_PER_BUFFER = int(os.getenv('PLAYBACK_FRAMES_PER_BUFFER', '1024'))

# ============================================================================
# LOGGING
# ============================================================================
LOG_OUTPUTS = os.getenv('LOG_OUTPUTS', 'stderr')  # comma separated: stdout, stderr, file
LOG_FILE_PATH = os.getenv('LOG_FILE_PATH', 'fireguard.log')
DEBUG_LOG_OUTPUTS = os.getenv('DEBUG_LOG_OUTPUTS', LOG_OUTPUTS)
DEBUG_LOG_FILE_PATH = os.getenv('DEBUG_LOG_FILE_PATH', LOG_FILE_PATH)
