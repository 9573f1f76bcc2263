"""Path and tool constants for mac-cleanup."""

import pathlib

HOME = str(pathlib.Path.home())

SPACE_ROOT = "/"
KEEPALIVE_INTERVAL = 60
COMMAND_TIMEOUT = 300

SIZE_UNITS = ["Bytes", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB", "ZiB", "YiB"]

# Fallback locations for tools that are often missing from a sudo/launchd PATH
BREW_PATHS = ["/opt/homebrew/bin/brew", "/usr/local/bin/brew"]
DOCKER_PATHS = [
    "/usr/local/bin/docker",
    "/opt/homebrew/bin/docker",
    "/Applications/Docker.app/Contents/Resources/bin/docker",
]
XCRUN_PATHS = ["/usr/bin/xcrun"]
DSCACHEUTIL_PATHS = ["/usr/bin/dscacheutil"]
KILLALL_PATHS = ["/usr/bin/killall"]
PURGE_PATHS = ["/usr/sbin/purge"]

PYENV_CACHE_ENV = "PYENV_VIRTUALENV_CACHE_PATH"
