"""HostList 合并、排序、查找与格式化测试"""

import ipaddress
import json

import pytest

from etcdhosts.address import Family
from etcdhosts.errors import (
    ConflictError,
    DuplicateError,
    InvalidFamilyError,
    NotFoundError,
    ParseError,
)
from etcdhosts.hostfile import HostFile
from etcdhosts.hostlist import HostList, OutputFormat, compare_entries
from etcdhosts.models import HostEntry, new_host_entry


def _hostlist(*pairs) -> HostList:
    """按 (域名, 地址) 或 (域名, 地址, enabled) 创建 HostList"""
    hosts = HostList()
    for pair in pairs:
        hosts.add(new_host_entry(*pair))
    return hosts


class TestAdd:
    """合并策略"""

    def test_append(self) -> None:
        hosts = HostList()
        assert hosts.add(new_host_entry("a", "1.1.1.1")) is None
        assert len(hosts) == 1

    def test_duplicate_merges_enabled(self) -> None:
        hosts = HostList()
        hosts.add(new_host_entry("a", "1.1.1.1", False))
        result = hosts.add(new_host_entry("a", "1.1.1.1", True))
        assert isinstance(result, DuplicateError)
        assert len(hosts) == 1
        assert hosts[0].enabled is True

    def test_duplicate_keeps_enabled(self) -> None:
        hosts = HostList()
        hosts.add(new_host_entry("a", "1.1.1.1", True))
        result = hosts.add(new_host_entry("a", "1.1.1.1", False))
        assert isinstance(result, DuplicateError)
        assert hosts[0].enabled is True

    def test_conflict_replaces(self) -> None:
        hosts = _hostlist(("b", "3.3.3.3"), ("a", "1.1.1.1"))
        result = hosts.add(new_host_entry("a", "2.2.2.2"))
        assert isinstance(result, ConflictError)
        assert len(hosts) == 2
        assert hosts[1].address == ipaddress.IPv4Address("2.2.2.2")
        assert hosts.filter_by_domain("a") == [new_host_entry("a", "2.2.2.2")]

    def test_family_isolation(self) -> None:
        hosts = HostList()
        assert hosts.add(new_host_entry("a", "1.1.1.1")) is None
        assert hosts.add(new_host_entry("a", "::1")) is None
        assert len(hosts) == 2

    def test_invalid_candidate_rejected(self) -> None:
        hosts = HostList()
        bad = HostEntry(domain="", address=ipaddress.IPv4Address("1.1.1.1"))
        with pytest.raises(ParseError):
            hosts.add(bad)
        assert len(hosts) == 0

    def test_constructor_merges(self) -> None:
        hosts = HostList([
            new_host_entry("a", "1.1.1.1"),
            new_host_entry("a", "2.2.2.2"),
        ])
        assert hosts.entries == [new_host_entry("a", "2.2.2.2")]


class TestSort:
    """排序规则"""

    def test_canonical_order(self) -> None:
        hosts = _hostlist(
            ("b", "192.168.1.1"),
            ("localhost", "::1"),
            ("a", "10.0.0.1"),
            ("localhost", "127.0.0.1"),
        )
        hosts.sort()
        assert [e.to_hosts_line() for e in hosts] == [
            "127.0.0.1 localhost",
            "10.0.0.1 a",
            "192.168.1.1 b",
            "::1 localhost",
        ]
        assert hosts.format_unix() == (
            "127.0.0.1 localhost\n"
            "10.0.0.1 a\n"
            "192.168.1.1 b\n"
            "::1 localhost\n"
        )

    def test_loopback_before_lower_address(self) -> None:
        hosts = _hostlist(("x", "1.2.3.4"), ("y", "127.0.0.5"))
        hosts.sort()
        assert [e.domain for e in hosts] == ["y", "x"]

    def test_localhost_beats_address(self) -> None:
        hosts = _hostlist(("a", "1.1.1.1"), ("localhost", "10.0.0.1"))
        hosts.sort()
        assert hosts[0].domain == "localhost"

    def test_domain_bytes_order(self) -> None:
        hosts = _hostlist(
            ("ip6-loopback", "::1"),
            ("ip6-localhost", "::1"),
            ("ab", "::1"),
            ("a", "::1"),
        )
        hosts.sort()
        assert [e.domain for e in hosts] == ["a", "ab", "ip6-localhost", "ip6-loopback"]

    def test_uppercase_sorts_first(self) -> None:
        hosts = _hostlist(("a", "1.1.1.1"), ("B", "1.1.1.1"))
        hosts.sort()
        assert [e.domain for e in hosts] == ["B", "a"]

    def test_compare_equal(self) -> None:
        a = new_host_entry("a", "1.1.1.1", True)
        b = new_host_entry("a", "1.1.1.1", False)
        assert compare_entries(a, b) == 0


class TestLookup:
    """查找与删除"""

    def test_contains(self) -> None:
        hosts = _hostlist(("a", "1.1.1.1"), ("b", "::1"))
        assert hosts.contains(new_host_entry("a", "1.1.1.1"))
        assert not hosts.contains(new_host_entry("a", "1.1.1.2"))
        assert hosts.contains_domain("b")
        assert not hosts.contains_domain("c")
        assert hosts.contains_address("::1")
        assert hosts.contains_address(ipaddress.IPv4Address("1.1.1.1"))
        assert not hosts.contains_address("2.2.2.2")

    def test_index_of(self) -> None:
        hosts = _hostlist(("a", "1.1.1.1"), ("a", "::1"))
        assert hosts.index_of(new_host_entry("a", "::1")) == 1
        assert hosts.index_of(new_host_entry("b", "::1")) == -1
        assert hosts.index_of_domain_family("a", 4) == 0
        assert hosts.index_of_domain_family("a", Family.IPV6) == 1
        assert hosts.index_of_domain_family("b", 6) == -1

    @pytest.mark.parametrize("family", [0, 5, "6"])
    def test_invalid_family(self, family: object) -> None:
        hosts = _hostlist(("a", "1.1.1.1"))
        with pytest.raises(InvalidFamilyError):
            hosts.index_of_domain_family("a", family)
        with pytest.raises(InvalidFamilyError):
            hosts.filter_by_domain_family("a", family)
        with pytest.raises(InvalidFamilyError):
            hosts.enable_family("a", family)
        with pytest.raises(InvalidFamilyError):
            hosts.disable_family("a", family)
        with pytest.raises(InvalidFamilyError):
            hosts.remove_domain_family("a", family)

    def test_remove(self) -> None:
        hosts = _hostlist(("a", "1.1.1.1"), ("b", "2.2.2.2"))
        assert hosts.remove(-1) == 0
        assert hosts.remove(2) == 0
        assert hosts.remove(0) == 1
        assert [e.domain for e in hosts] == ["b"]

    def test_remove_domain(self) -> None:
        hosts = _hostlist(("a", "1.1.1.1"), ("a", "::1"), ("b", "2.2.2.2"))
        assert hosts.remove_domain("a") == 2
        assert hosts.remove_domain("a") == 0
        assert [e.domain for e in hosts] == ["b"]

    def test_remove_domain_family(self) -> None:
        hosts = _hostlist(("a", "1.1.1.1"), ("a", "::1"))
        assert hosts.remove_domain_family("a", 6) == 1
        assert hosts.entries == [new_host_entry("a", "1.1.1.1")]

    def test_find_domain_family(self) -> None:
        hosts = _hostlist(("a", "1.1.1.1"), ("a", "::1"))
        assert hosts.find_domain_family("a", 6) == new_host_entry("a", "::1")
        assert hosts.find_domain_family("b", 4) is None
        assert hosts.filter_by_domain_family("a", 4) == [new_host_entry("a", "1.1.1.1")]
        assert hosts.filter_by_domain_family("b", 4) == []

    def test_filters(self) -> None:
        hosts = _hostlist(("a", "1.1.1.1"), ("b", "1.1.1.1"), ("a", "::1"))
        assert [e.domain for e in hosts.filter_by_address("1.1.1.1")] == ["a", "b"]
        assert len(hosts.filter_by_domain("a")) == 2
        assert hosts.filter_by_address("9.9.9.9") == []

    def test_unique_addresses(self) -> None:
        hosts = _hostlist(
            ("b", "10.0.0.1"),
            ("x", "::1"),
            ("a", "10.0.0.1"),
            ("localhost", "127.0.0.1"),
        )
        assert [str(a) for a in hosts.unique_addresses()] == ["127.0.0.1", "10.0.0.1", "::1"]


class TestEnableDisable:
    """启用与禁用"""

    def test_disable_then_enable(self) -> None:
        hosts = _hostlist(("a", "1.1.1.1"))
        hosts.disable("a")
        assert hosts[0].enabled is False
        hosts.enable("a")
        assert hosts[0].enabled is True

    def test_first_match_only(self) -> None:
        hosts = _hostlist(("a", "1.1.1.1"), ("a", "::1"))
        hosts.disable("a")
        assert [e.enabled for e in hosts] == [False, True]

    def test_family_scoped(self) -> None:
        hosts = _hostlist(("a", "1.1.1.1"), ("a", "::1"))
        hosts.disable_family("a", 6)
        assert [e.enabled for e in hosts] == [True, False]
        hosts.enable_family("a", Family.IPV6)
        assert [e.enabled for e in hosts] == [True, True]

    def test_not_found(self) -> None:
        hosts = _hostlist(("a", "1.1.1.1"))
        with pytest.raises(NotFoundError):
            hosts.enable("b")
        with pytest.raises(NotFoundError):
            hosts.disable("b")
        with pytest.raises(NotFoundError):
            hosts.disable_family("a", 6)
        with pytest.raises(NotFoundError):
            hosts.enable_family("a", 6)

    def test_filtered_entries_not_aliased(self) -> None:
        hosts = _hostlist(("a", "1.1.1.1"))
        before = hosts.filter_by_domain("a")[0]
        hosts.disable("a")
        assert before.enabled is True
        assert hosts.filter_by_domain("a")[0].enabled is False


class TestFormat:
    """Unix 与 Windows 格式"""

    def test_unix_groups_by_address(self) -> None:
        hosts = _hostlist(
            ("c", "10.0.0.1", False),
            ("b", "10.0.0.1"),
            ("a", "10.0.0.1"),
            ("d", "10.0.0.2", False),
        )
        assert hosts.format_unix() == (
            "10.0.0.1 a b\n"
            "# 10.0.0.1 c\n"
            "# 10.0.0.2 d\n"
        )

    def test_windows_one_line_per_entry(self) -> None:
        hosts = _hostlist(
            ("b", "10.0.0.1"),
            ("a", "10.0.0.1", False),
            ("localhost", "::1"),
        )
        assert hosts.format_windows() == (
            "# 10.0.0.1 a\n"
            "10.0.0.1 b\n"
            "::1 localhost\n"
        )

    def test_format_selector(self) -> None:
        hosts = _hostlist(("a", "10.0.0.1"), ("b", "10.0.0.1"))
        assert hosts.format() == "10.0.0.1 a b\n"
        assert hosts.format(OutputFormat.UNIX) == "10.0.0.1 a b\n"
        assert hosts.format(OutputFormat.WINDOWS) == "10.0.0.1 a\n10.0.0.1 b\n"

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("windows", OutputFormat.WINDOWS),
            ("Windows", OutputFormat.WINDOWS),
            ("unix", OutputFormat.UNIX),
            ("linux", OutputFormat.UNIX),
            ("darwin", OutputFormat.UNIX),
            ("", OutputFormat.UNIX),
            (None, OutputFormat.UNIX),
        ],
    )
    def test_from_name(self, name, expected) -> None:
        assert OutputFormat.from_name(name) is expected

    def test_empty(self) -> None:
        assert HostList().format_unix() == ""
        assert HostList().format_windows() == ""

    def test_round_trip(self) -> None:
        hosts = _hostlist(
            ("localhost", "127.0.0.1"),
            ("web", "10.0.0.1"),
            ("api", "10.0.0.1"),
            ("old", "10.0.0.1", False),
            ("gone", "192.168.0.9", False),
            ("localhost", "::1"),
            ("ip6-loopback", "::1"),
        )
        first = hosts.format_unix()
        second = HostFile(first).format()
        assert second == first
        assert HostFile(second).format() == second

    def test_round_trip_unusual_domains(self) -> None:
        hosts = _hostlist(
            ("a\xa0b", "10.0.0.1"),
            ("例子.测试", "10.0.0.1"),
            ("c　d", "10.0.0.2", False),
        )
        for domain in ("a b", "x#y", "ok\n6.6.6.6 bank.example"):
            with pytest.raises(ParseError):
                hosts.add(HostEntry(domain=domain, address=ipaddress.IPv4Address("10.0.0.3")))
        assert len(hosts) == 3

        for output_format in OutputFormat:
            text = hosts.format(output_format)
            reparsed = HostFile(text)
            assert reparsed.errors == []
            assert reparsed.hosts.entries == hosts.entries
            assert [e.enabled for e in reparsed.hosts] == [e.enabled for e in hosts]
            assert reparsed.format(output_format) == text


class TestDumpApply:
    """JSON 导出与导入"""

    def test_dump_keeps_order(self) -> None:
        hosts = _hostlist(("b", "2.2.2.2"), ("a", "1.1.1.1", False))
        assert json.loads(hosts.dump()) == [
            {"domain": "b", "ip": "2.2.2.2", "enabled": True},
            {"domain": "a", "ip": "1.1.1.1", "enabled": False},
        ]

    def test_apply_merges(self) -> None:
        hosts = _hostlist(("a", "1.1.1.1", False), ("b", "2.2.2.2"))
        hosts.apply(json.dumps([
            {"domain": "a", "ip": "1.1.1.1", "enabled": True},
            {"domain": "b", "ip": "3.3.3.3", "enabled": True},
            {"domain": "c", "address": "::1", "enabled": False},
            {"domain": "", "ip": "4.4.4.4", "enabled": True},
            {"domain": "d", "ip": "bogus", "enabled": True},
        ]))
        assert hosts.entries == [
            new_host_entry("a", "1.1.1.1"),
            new_host_entry("b", "3.3.3.3"),
            new_host_entry("c", "::1"),
        ]
        assert hosts[0].enabled is True
        assert hosts[2].enabled is False

    def test_dump_apply_round_trip(self) -> None:
        hosts = _hostlist(("a", "1.1.1.1", False), ("a", "::1"))
        copy = HostList()
        copy.apply(hosts.dump())
        assert copy.entries == hosts.entries
        assert [e.enabled for e in copy] == [False, True]

    @pytest.mark.parametrize("data", ["not json", '{"domain": "a"}', b"\xff"])
    def test_apply_invalid(self, data) -> None:
        with pytest.raises(ParseError):
            HostList().apply(data)
