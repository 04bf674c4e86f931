"""Exception types raised by the analysis engine."""

from __future__ import annotations


class WebmapError(RuntimeError):
    """Base class for errors that the dispatcher reports as ``{"error": ...}``."""


class FilesystemError(WebmapError):
    """Raised when the project root cannot be enumerated."""


class FileReadError(WebmapError):
    """Raised when a single file cannot be read as UTF-8 text."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to read {path}: {reason}")
        self.path = path
        self.reason = reason


class ManifestMissing(WebmapError):
    """Raised by analyses that cannot proceed without package.json."""

    def __init__(self, filename: str = "package.json") -> None:
        super().__init__(f"No {filename} found")
        self.filename = filename


class UnknownOperation(WebmapError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class UnknownResource(WebmapError):
    def __init__(self, identifier: str) -> None:
        super().__init__(f"Unknown resource: {identifier}")
        self.identifier = identifier


class UnknownPrompt(WebmapError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown prompt: {name}")
        self.name = name


class MissingPromptArgument(WebmapError):
    def __init__(self, prompt: str, argument: str) -> None:
        super().__init__(f"Prompt '{prompt}' requires argument '{argument}'")
        self.prompt = prompt
        self.argument = argument


__all__ = [
    "FileReadError",
    "FilesystemError",
    "ManifestMissing",
    "MissingPromptArgument",
    "UnknownOperation",
    "UnknownPrompt",
    "UnknownResource",
    "WebmapError",
]
