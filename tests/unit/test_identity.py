"""
Unit tests for the host identity accessor.
"""
import sys
from unittest import mock
import pytest

from pocketdim.UTILS.identity import HostIdentity


def test_current_uses_real_ids():
    proc = mock.Mock()
    proc.username.return_value = "dev"
    proc.uids.return_value = mock.Mock(real=1000, effective=0)
    proc.gids.return_value = mock.Mock(real=1000, effective=0)
    with mock.patch("pocketdim.UTILS.identity.psutil.Process", return_value=proc):
        assert HostIdentity.current() == HostIdentity("dev", 1000, 1000)


def test_rejects_negative_ids():
    with pytest.raises(ValueError):
        HostIdentity("dev", -1, 1000)


@pytest.mark.skipif(sys.platform == "win32", reason="Requires POSIX ids")
def test_current_process():
    identity = HostIdentity.current()
    assert identity.username
    assert identity.uid >= 0
    assert identity.gid >= 0
