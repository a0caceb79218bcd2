"""Presentation adapter: lenses, provider and host actions."""

from lens.actions import Host, HostError, copy_error, dispatch, insert_code
from lens.lenses import COMMAND_COPY_ERROR, COMMAND_INSERT_CODE, Lens, build_lenses
from lens.provider import LensProvider

__all__ = [
    "COMMAND_COPY_ERROR",
    "COMMAND_INSERT_CODE",
    "Host",
    "HostError",
    "Lens",
    "LensProvider",
    "build_lenses",
    "copy_error",
    "dispatch",
    "insert_code",
]
