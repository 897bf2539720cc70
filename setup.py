"""Packaging for FocusPulse.

Install for development:
    pip install -e ".[test]"

Build a macOS .app bundle:
    pip install py2app
    python setup.py py2app
"""

import sys

from setuptools import setup, find_packages

APP = ["main.py"]
DATA_FILES = []
OPTIONS = {
    "argv_emulation": False,
    "iconfile": None,
    "plist": {
        "CFBundleName": "FocusPulse",
        "CFBundleDisplayName": "FocusPulse",
        "CFBundleIdentifier": "com.focuspulse.app",
        "CFBundleVersion": "0.1.0",
        "CFBundleShortVersionString": "0.1.0",
        "LSMinimumSystemVersion": "13.0",
    },
}

py2app_kwargs = {}
if "py2app" in sys.argv:
    py2app_kwargs = dict(
        app=APP,
        data_files=DATA_FILES,
        options={"py2app": OPTIONS},
        setup_requires=["py2app"],
    )

setup(
    name="FocusPulse",
    version="0.1.0",
    description="Pomodoro session engine: work and break cycles with history",
    packages=find_packages(include=["focuspulse", "focuspulse.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.4",
        "loguru>=0.7",
        "typer>=0.9",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": ["focuspulse=focuspulse.__main__:main"],
    },
    **py2app_kwargs,
)
