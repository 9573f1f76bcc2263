"""Cleanup targets for mac-cleanup, in sweep order."""
from __future__ import annotations

import os
from typing import List

from .config import RunConfig
from .constants import (
    BREW_PATHS,
    DOCKER_PATHS,
    DSCACHEUTIL_PATHS,
    KILLALL_PATHS,
    PURGE_PATHS,
    XCRUN_PATHS,
)
from .models import CleanupTarget, DirExists, ExternalTool, TargetKind, ToolPresent, ToolStep

BREW = ExternalTool("brew", tuple(BREW_PATHS))
DOCKER = ExternalTool("docker", tuple(DOCKER_PATHS))
XCRUN = ExternalTool("xcrun", tuple(XCRUN_PATHS))
DSCACHEUTIL = ExternalTool("dscacheutil", tuple(DSCACHEUTIL_PATHS))
KILLALL = ExternalTool("killall", tuple(KILLALL_PATHS))
PURGE = ExternalTool("purge", tuple(PURGE_PATHS))
COMPOSER = ExternalTool("composer")
GEM = ExternalTool("gem")
NPM = ExternalTool("npm")
YARN = ExternalTool("yarn")
PNPM = ExternalTool("pnpm")
POD = ExternalTool("pod")
GO = ExternalTool("go")
CONDA = ExternalTool("conda")
PIP = ExternalTool("pip3")


def paths_target(name, desc, paths, precondition=None, sudo=False) -> CleanupTarget:
    return CleanupTarget(
        name=name,
        desc=desc,
        kind=TargetKind.PATHS,
        paths=tuple(paths),
        precondition=precondition,
        sudo=sudo,
    )


def tool_target(name, desc, tool, steps) -> CleanupTarget:
    """A target gated on `tool` that runs `steps` (argument tuples or ToolSteps)."""
    built = tuple(s if isinstance(s, ToolStep) else ToolStep(tool, tuple(s)) for s in steps)
    return CleanupTarget(
        name=name,
        desc=desc,
        kind=TargetKind.TOOL,
        steps=built,
        precondition=ToolPresent(tool),
    )


def homebrew_steps(update: bool) -> List[ToolStep]:
    steps = []
    if update:
        steps.append(ToolStep(BREW, ("update",), unbounded=True))
        steps.append(ToolStep(BREW, ("upgrade",), unbounded=True))
    steps.append(ToolStep(BREW, ("cleanup", "-s")))
    steps.append(ToolStep(BREW, ("tap", "--repair")))
    return steps


def build_targets(cfg: RunConfig) -> List[CleanupTarget]:
    """Return the ordered target table for one run."""
    home = cfg.home

    def h(*parts):
        return os.path.join(home, *parts)

    app_support = h("Library", "Application Support")
    steam = os.path.join(app_support, "Steam")
    minecraft = os.path.join(app_support, "minecraft")
    lunar = h(".lunarclient")
    teams = os.path.join(app_support, "Microsoft", "Teams")
    vscode = os.path.join(app_support, "Code")
    drivefs = os.path.join(app_support, "Google", "DriveFS")

    targets = [
        paths_target(
            "trash",
            "Emptying the Trash on all mounted volumes and the main HDD",
            ["/Volumes/*/.Trashes", h(".Trash")],
            sudo=True,
        ),
        paths_target(
            "system_logs",
            "Clearing system and application log files",
            [
                "/private/var/log/asl/*.asl",
                "/Library/Logs/DiagnosticReports",
                "/Library/Logs/CreativeCloud",
                "/Library/Logs/Adobe",
                h("Library", "Containers", "com.apple.mail", "Data", "Library", "Logs", "Mail"),
                h("Library", "Logs", "CoreSimulator"),
            ],
            sudo=True,
        ),
        paths_target(
            "adobe_cache",
            "Clearing Adobe media cache files",
            [os.path.join(app_support, "Adobe", "Common", "Media Cache Files")],
            precondition=DirExists(os.path.join(app_support, "Adobe")),
        ),
        paths_target(
            "ios_apps",
            "Cleaning up iOS applications",
            [h("Music", "iTunes", "iTunes Media", "Mobile Applications")],
            precondition=DirExists(h("Music", "iTunes", "iTunes Media", "Mobile Applications")),
        ),
        paths_target(
            "ios_backups",
            "Removing iOS device backups",
            [os.path.join(app_support, "MobileSync", "Backup")],
            precondition=DirExists(os.path.join(app_support, "MobileSync", "Backup")),
        ),
        paths_target(
            "xcode",
            "Cleaning up Xcode derived data, archives and device logs",
            [
                h("Library", "Developer", "Xcode", "DerivedData"),
                h("Library", "Developer", "Xcode", "Archives"),
                h("Library", "Developer", "Xcode", "iOS Device Logs"),
            ],
            precondition=DirExists(h("Library", "Developer", "Xcode")),
        ),
        tool_target(
            "ios_simulators",
            "Cleaning up iOS simulators",
            XCRUN,
            [
                ("simctl", "shutdown", "all"),
                ("simctl", "delete", "unavailable"),
                ("simctl", "erase", "all"),
            ],
        ),
        paths_target(
            "cocoapods_cache",
            "Cleaning up the CocoaPods cache",
            [h("Library", "Caches", "CocoaPods")],
            precondition=DirExists(h("Library", "Caches", "CocoaPods")),
        ),
        paths_target(
            "chrome_cache",
            "Clearing the Google Chrome application cache",
            [os.path.join(app_support, "Google", "Chrome", "Default", "Application Cache")],
            precondition=DirExists(os.path.join(app_support, "Google", "Chrome", "Default", "Application Cache")),
        ),
        paths_target(
            "gradle_cache",
            "Cleaning up the Gradle cache",
            [h(".gradle", "caches")],
            precondition=DirExists(h(".gradle", "caches")),
        ),
        paths_target(
            "dropbox_cache",
            "Clearing the Dropbox cache",
            [h("Dropbox", ".dropbox.cache")],
            precondition=DirExists(h("Dropbox")),
        ),
        paths_target(
            "google_drive_cache",
            "Clearing the Google Drive File Stream cache",
            [os.path.join(drivefs, "*", "content_cache"), os.path.join(drivefs, "Logs")],
            precondition=DirExists(drivefs),
        ),
        tool_target(
            "composer_cache",
            "Cleaning up the Composer cache",
            COMPOSER,
            [("clearcache", "--no-interaction")],
        ),
        paths_target(
            "steam_cache",
            "Deleting Steam caches, logs and temp files",
            [
                os.path.join(steam, "appcache"),
                os.path.join(steam, "depotcache"),
                os.path.join(steam, "logs"),
                os.path.join(steam, "steamapps", "shadercache"),
                os.path.join(steam, "steamapps", "temp"),
                os.path.join(steam, "steamapps", "download"),
            ],
            precondition=DirExists(steam),
        ),
        paths_target(
            "minecraft_logs",
            "Deleting Minecraft logs and crash reports",
            [
                os.path.join(minecraft, "logs"),
                os.path.join(minecraft, "crash-reports"),
                os.path.join(minecraft, "webcache"),
                os.path.join(minecraft, "webcache2"),
                os.path.join(minecraft, "*.log"),
                os.path.join(minecraft, "launcher_cef_log.txt"),
            ],
            precondition=DirExists(minecraft),
        ),
        paths_target(
            "lunar_client",
            "Deleting Lunar Client logs and caches",
            [
                os.path.join(lunar, "game-cache"),
                os.path.join(lunar, "launcher-cache"),
                os.path.join(lunar, "logs"),
                os.path.join(lunar, "offline", "*", "logs"),
            ],
            precondition=DirExists(lunar),
        ),
        paths_target(
            "wget_hsts",
            "Deleting the wget HSTS history",
            [h(".wget-hsts")],
        ),
        paths_target(
            "teams_cache",
            "Deleting Microsoft Teams logs and caches",
            [
                os.path.join(teams, "IndexedDB"),
                os.path.join(teams, "Cache"),
                os.path.join(teams, "Application Cache"),
                os.path.join(teams, "Code Cache"),
                os.path.join(teams, "blob_storage"),
                os.path.join(teams, "databases"),
                os.path.join(teams, "gpucache"),
                os.path.join(teams, "Local Storage"),
                os.path.join(teams, "tmp"),
                os.path.join(teams, "*logs*.txt"),
                h("Library", "Logs", "Microsoft Teams"),
            ],
            precondition=DirExists(teams),
        ),
        paths_target(
            "poetry_cache",
            "Deleting the Poetry cache",
            [h("Library", "Caches", "pypoetry")],
            precondition=DirExists(h("Library", "Caches", "pypoetry")),
        ),
        paths_target(
            "jetbrains_cache",
            "Deleting JetBrains IDE caches and logs",
            [h("Library", "Caches", "JetBrains"), h("Library", "Logs", "JetBrains")],
            precondition=DirExists(h("Library", "Caches", "JetBrains")),
        ),
        paths_target(
            "vscode_cache",
            "Deleting Visual Studio Code caches and logs",
            [
                os.path.join(vscode, "Cache"),
                os.path.join(vscode, "CachedData"),
                os.path.join(vscode, "CachedExtensionVSIXs"),
                os.path.join(vscode, "Code Cache"),
                os.path.join(vscode, "logs"),
            ],
            precondition=DirExists(vscode),
        ),
        paths_target(
            "android_cache",
            "Deleting the Android SDK cache",
            [h(".android", "cache"), h(".android", "build-cache")],
            precondition=DirExists(h(".android")),
        ),
        paths_target(
            "kube_cache",
            "Deleting the kubectl cache",
            [h(".kube", "cache")],
            precondition=DirExists(h(".kube", "cache")),
        ),
        tool_target(
            "homebrew",
            "Updating and cleaning up Homebrew" if cfg.update else "Cleaning up Homebrew",
            BREW,
            homebrew_steps(cfg.update),
        ),
        paths_target(
            "homebrew_cache",
            "Deleting the Homebrew download cache",
            [h("Library", "Caches", "Homebrew")],
            precondition=ToolPresent(BREW),
        ),
        tool_target("gem", "Cleaning up old Ruby gem versions", GEM, [("cleanup",)]),
        tool_target(
            "docker",
            "Cleaning up Docker (docker system prune -af, no volumes)",
            DOCKER,
            [("system", "prune", "-af")],
        ),
    ]

    if cfg.pyenv_cache:
        targets.append(
            paths_target(
                "pyenv_cache",
                "Removing the pyenv-virtualenv cache",
                [cfg.pyenv_cache],
                precondition=DirExists(cfg.pyenv_cache),
            )
        )

    targets += [
        tool_target("npm_cache", "Cleaning up the npm cache", NPM, [("cache", "clean", "--force")]),
        tool_target("yarn_cache", "Cleaning up the Yarn cache", YARN, [("cache", "clean", "--force")]),
        tool_target("pnpm_store", "Pruning the pnpm store", PNPM, [("store", "prune")]),
        tool_target("pod_cache", "Cleaning up the CocoaPods download cache", POD, [("cache", "clean", "--all")]),
        tool_target("go_modcache", "Clearing the Go module cache", GO, [("clean", "-modcache")]),
        tool_target("conda_cache", "Cleaning up the conda caches", CONDA, [("clean", "--all", "--yes")]),
        tool_target("pip_cache", "Purging the pip cache", PIP, [("cache", "purge")]),
        paths_target(
            "system_caches",
            "Clearing system and user cache files",
            ["/Library/Caches", "/System/Library/Caches", h("Library", "Caches")],
            sudo=True,
        ),
        tool_target(
            "dns_cache",
            "Flushing the DNS cache",
            DSCACHEUTIL,
            [
                ToolStep(DSCACHEUTIL, ("-flushcache",), sudo=True),
                ToolStep(KILLALL, ("-HUP", "mDNSResponder"), sudo=True),
            ],
        ),
        tool_target(
            "memory",
            "Purging inactive memory",
            PURGE,
            [ToolStep(PURGE, (), sudo=True)],
        ),
    ]
    return targets
