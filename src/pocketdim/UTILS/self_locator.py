"""
Resolution of the running executable, which is injected into new containers.
"""
import logging
import os

from ..constants import SELF_EXE_LINK
from ..errors import SelfPathUnavailable

LOG = logging.getLogger(__name__)


def resolve_self_path(link: str = SELF_EXE_LINK) -> str:
    """
    Resolves the absolute path of the running executable by reading the
    platform's self-executable link.

    :param link: The symbolic link to follow.
    :return: The absolute path the link points at.
    :raises SelfPathUnavailable: If the link cannot be read.
    """
    try:
        path = os.readlink(link)
    except OSError as e:
        raise SelfPathUnavailable(link, e.strerror or str(e)) from e

    LOG.debug(f"Resolved own executable: {path}")
    return path
