"""
Setup script for the Fireguard alarm audio bridge
Enables editable installation: pip install -e .
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text() if readme_file.exists() else ""

setup(
    name="fireguard-alarm-audio",
    version="1.0.0",
    description="Alarm sound bridge: alarm-sink volume nudge and looping system alarm tone playback",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Fireguard Team",
    python_requires=">=3.8",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["config"],
    install_requires=[
        "pyaudio>=0.2.11",
        "soundfile>=0.12.1",
        "numpy>=1.26.4",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "fireguard-bridge=fireguard.bridge:main",
        ],
    },
)
