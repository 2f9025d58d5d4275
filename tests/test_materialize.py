"""Tests for mping.materialize."""

import pytest

from mping.address import IPVersion, SocketAddress
from mping.errors import InternalConsistencyError
from mping.materialize import materialize_targets
from mping.models import Target


def _target(label: str, *addrs: str) -> Target:
    return Target(label, [SocketAddress.from_text(a, 4321) for a in addrs])


class TestMaterializeTargets:
    def test_each_target_gets_one_address(self) -> None:
        targets = [
            _target("a", "192.0.2.1", "2001:db8::1"),
            _target("b", "2001:db8::2", "192.0.2.2"),
        ]

        materialize_targets(targets, IPVersion.V6)

        assert [t.resolved_address.host for t in targets] == ["2001:db8::1", "2001:db8::2"]
        assert all(t.candidates == [] for t in targets)

    def test_unconstrained_takes_first_candidate(self) -> None:
        targets = [_target("a", "2001:db8::1", "192.0.2.1")]

        materialize_targets(targets, IPVersion.ANY)

        assert targets[0].resolved_address.host == "2001:db8::1"

    def test_missing_family_is_internal_error(self) -> None:
        targets = [_target("a", "192.0.2.1"), _target("b", "2001:db8::2")]

        with pytest.raises(InternalConsistencyError, match="host b"):
            materialize_targets(targets, IPVersion.V4)

    def test_empty_list(self) -> None:
        materialize_targets([], IPVersion.V4)
