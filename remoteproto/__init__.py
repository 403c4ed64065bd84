"""remoteproto - Protocol Buffers schemas for remote view models."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("remoteproto")
except PackageNotFoundError:
    __version__ = "(local)"
