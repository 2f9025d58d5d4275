"""Tests for mping.negotiate — IP version negotiation."""

import pytest

from mping.address import IPVersion, SocketAddress
from mping.errors import FamilyMismatchError, ResolutionError
from mping.models import Target
from mping.negotiate import negotiate_ip_version


def _target(label: str, *addrs: str) -> Target:
    return Target(label, [SocketAddress.from_text(a, 4321) for a in addrs])


V4_ONLY = ("192.0.2.1",)
V6_ONLY = ("2001:db8::1",)
DUAL = ("192.0.2.2", "2001:db8::2")


class TestForcedVersion:
    """An explicit -4/-6 always wins."""

    @pytest.mark.parametrize("forced", [IPVersion.V4, IPVersion.V6])
    def test_forced_wins_over_conflicting_targets(
        self, dns_table: dict, forced: IPVersion
    ) -> None:
        targets = [_target("a", *V4_ONLY), _target("b", *V6_ONLY)]

        assert negotiate_ip_version(forced, None, "4321", targets) == forced

    def test_forced_skips_multicast_resolution(self, dns_table: dict) -> None:
        """The group is not even resolved when a version is forced."""
        targets = [_target("a", *V4_ONLY)]

        assert negotiate_ip_version(4, "nosuchgroup", "4321", targets) == IPVersion.V4


class TestMulticastConstraint:
    """A single-family multicast group forces that family."""

    def test_ipv6_group_forces_ipv6(self, dns_table: dict) -> None:
        targets = [_target("a", *DUAL), _target("b", *V6_ONLY)]

        result = negotiate_ip_version(0, "ff3e::1", "4321", targets)

        assert result == IPVersion.V6

    def test_ipv4_group_with_dual_targets(self, dns_table: dict) -> None:
        targets = [_target("a", *DUAL), _target("b", *DUAL)]

        assert negotiate_ip_version(0, "239.1.1.1", "4321", targets) == IPVersion.V4

    def test_target_of_other_family_fails(self, dns_table: dict) -> None:
        targets = [_target("a", *DUAL), _target("b", *V4_ONLY)]

        with pytest.raises(FamilyMismatchError, match="host b supports only ipv4"):
            negotiate_ip_version(0, "ff3e::1", "4321", targets)

    def test_dual_stack_group_falls_through_to_targets(self, dns_table: dict) -> None:
        dns_table["group"] = ["239.1.1.1", "ff3e::1"]
        targets = [_target("a", *DUAL), _target("b", *V6_ONLY)]

        assert negotiate_ip_version(0, "group", "4321", targets) == IPVersion.V6

    def test_group_without_addresses(self, dns_table: dict) -> None:
        dns_table["empty"] = []

        with pytest.raises(ResolutionError):
            negotiate_ip_version(0, "empty", "4321", [_target("a", *DUAL)])

    def test_target_without_addresses(self, dns_table: dict) -> None:
        targets = [_target("a", *DUAL), _target("b")]

        with pytest.raises(ResolutionError, match="Host b doesn't support ipv4 or ipv6"):
            negotiate_ip_version(0, "ff3e::1", "4321", targets)


class TestTargetNegotiation:
    """Without forced version or constraining group, targets decide."""

    def test_all_dual_stack_is_unconstrained(self, dns_table: dict) -> None:
        targets = [_target("a", *DUAL), _target("b", *DUAL)]

        assert negotiate_ip_version(0, None, "4321", targets) == IPVersion.ANY

    def test_first_single_family_target_is_pivot(self, dns_table: dict) -> None:
        targets = [_target("a", *DUAL), _target("b", *V4_ONLY), _target("c", *DUAL)]

        assert negotiate_ip_version(0, None, "4321", targets) == IPVersion.V4

    def test_all_same_family(self, dns_table: dict) -> None:
        targets = [_target("a", *V6_ONLY), _target("b", "2001:db8::3")]

        assert negotiate_ip_version(0, None, "4321", targets) == IPVersion.V6

    def test_conflicting_targets_fail(self, dns_table: dict) -> None:
        targets = [_target("a", *V4_ONLY), _target("b", *V6_ONLY)]

        with pytest.raises(
            FamilyMismatchError, match="Host b doesn't support IP version 4"
        ):
            negotiate_ip_version(0, None, "4321", targets)

    def test_conflict_before_pivot_is_found_on_rescan(self, dns_table: dict) -> None:
        """The rescan covers targets that came before the pivot too."""
        targets = [_target("a", *DUAL), _target("b", *V6_ONLY), _target("c", *V4_ONLY)]

        with pytest.raises(FamilyMismatchError, match="Host c"):
            negotiate_ip_version(0, None, "4321", targets)

    def test_target_without_addresses(self, dns_table: dict) -> None:
        with pytest.raises(ResolutionError, match="Host a"):
            negotiate_ip_version(0, None, "4321", [_target("a")])
