# @TASK P2-T2.1 - QuickConnect address helpers tests
# @TEST tests/test_addresses.py

"""Tests for address classification and IPv6 URL formatting."""

import pytest

from synology_gateway.quickconnect.addresses import (
    format_hostname,
    is_ipv4,
    is_ipv6,
    is_loopback,
    is_private,
)


class TestIsPrivate:
    @pytest.mark.parametrize(
        "address",
        [
            "192.168.1.1",
            "10.0.0.5",
            "172.16.0.1",
            "172.31.255.254",
            "127.0.0.1",
            "169.254.10.20",
            "::ffff:192.168.0.10",
            "fd12:3456::1",
            "fe80::1c2d:3eff:fe4f:5a6b",
            "::1",
            "::",
        ],
    )
    def test_private(self, address):
        assert is_private(address) is True

    @pytest.mark.parametrize(
        "address",
        ["8.8.8.8", "172.32.0.1", "100.64.0.1", "2001:db8::1", "nas.example.com", ""],
    )
    def test_not_private(self, address):
        assert is_private(address) is False


class TestIsLoopback:
    @pytest.mark.parametrize("address", ["127.0.0.1", "127.1.2.3", "::1", "::", "fe80::1", "::ffff:127.0.0.1"])
    def test_loopback(self, address):
        assert is_loopback(address) is True

    @pytest.mark.parametrize("address", ["192.168.1.1", "fe80::2", "8.8.8.8", "localhost"])
    def test_not_loopback(self, address):
        assert is_loopback(address) is False


class TestIpVersion:
    def test_ipv6_loopback(self):
        assert is_ipv6("::1") is True
        assert is_ipv4("::1") is False

    def test_ipv4(self):
        assert is_ipv4("192.168.1.1") is True
        assert is_ipv6("192.168.1.1") is False

    def test_hostnames_are_neither(self):
        assert is_ipv4("cafe") is False
        assert is_ipv6("cafe") is False


class TestFormatHostname:
    def test_ipv6_is_bracketed(self):
        assert format_hostname("2001:db8::10") == "[2001:db8::10]"

    def test_ipv4_is_untouched(self):
        assert format_hostname("192.168.1.10") == "192.168.1.10"

    def test_hostname_is_untouched(self):
        assert format_hostname("nas.example.com") == "nas.example.com"
