"""
HostList：去重、可排序的 HostEntry 集合

集合内的规则:
    - 同一域名可以同时有一个 IPv4 和一个 IPv6 条目
    - 同一域名同一地址族最多只有一个条目
    - 再次添加同一域名同一地址族的条目时，新条目替换旧条目

排序规则是确定性的，保证格式化输出稳定。集合不一定随时有序，
格式化和枚举地址之前会自动排序。
"""

import json
from dataclasses import replace
from enum import Enum
from functools import cmp_to_key
from typing import Iterable, Iterator, List, Optional, Union

from etcdhosts.address import Family, IPAddress, check_family, loopback_surrogate, parse_address
from etcdhosts.errors import (
    ConflictError,
    DuplicateError,
    HostsError,
    NotFoundError,
    ParseError,
)
from etcdhosts.models import HostEntry, new_host_entry

LOCALHOST = "localhost"


class OutputFormat(Enum):
    """hosts 文件输出格式"""

    UNIX = "unix"
    WINDOWS = "windows"

    @classmethod
    def from_name(cls, name: Optional[str]) -> "OutputFormat":
        """
        按名称选择输出格式

        只有 "windows" 对应 WINDOWS，其余（unix、linux、darwin、freebsd ...）
        都使用 Unix 格式。
        """
        if name and name.strip().lower() == cls.WINDOWS.value:
            return cls.WINDOWS
        return cls.UNIX


def _compare_bytes(a: bytes, b: bytes) -> int:
    if a == b:
        return 0
    return -1 if a < b else 1


def compare_entries(a: HostEntry, b: HostEntry) -> int:
    """
    比较两个条目的排序位置

    1. IPv4 在 IPv6 之前
    2. 同一地址族内 localhost 在前
    3. 按回环替代地址的字节比较（127.x 视为 0.x）
    4. 地址相同时按域名字节比较
    """
    if a.is_ipv6 != b.is_ipv6:
        return 1 if a.is_ipv6 else -1

    a_local = a.domain == LOCALHOST
    b_local = b.domain == LOCALHOST
    if a_local != b_local:
        return -1 if a_local else 1

    result = _compare_bytes(
        loopback_surrogate(a.address).packed,
        loopback_surrogate(b.address).packed
    )
    if result:
        return result

    return _compare_bytes(a.domain.encode("utf-8"), b.domain.encode("utf-8"))


class HostList:
    """
    HostEntry 的有序集合，负责合并策略、排序、查找和格式化

    条目是不可变记录；启用/禁用通过按索引写回新记录完成。
    不是线程安全的，并发修改需要调用方自行串行化。
    """

    def __init__(self, entries: Optional[Iterable[HostEntry]] = None):
        self._entries: List[HostEntry] = []
        for entry in entries or []:
            self.add(entry)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HostEntry]:
        return iter(list(self._entries))

    def __getitem__(self, index: int) -> HostEntry:
        return self._entries[index]

    def __repr__(self) -> str:
        return f"HostList({self._entries!r})"

    @property
    def entries(self) -> List[HostEntry]:
        """当前条目的副本（按当前存储顺序）"""
        return list(self._entries)

    def sort(self) -> None:
        """按排序规则就地排序"""
        self._entries.sort(key=cmp_to_key(compare_entries))

    # 合并

    def add(self, candidate: HostEntry) -> Optional[HostsError]:
        """
        添加条目，重复或冲突时合并

        - 已有相同条目: enabled 取两者之或，返回 DuplicateError
        - 同域名同地址族但地址不同: 原位置替换为新条目，返回 ConflictError
        - 否则追加，返回 None

        返回的错误只是诊断信息，合并已经生效，不会回滚。

        异常:
            ParseError: 如果候选条目校验失败（集合不变）
        """
        entry = new_host_entry(candidate.domain, candidate.address, candidate.enabled)

        for index, found in enumerate(self._entries):
            if found == entry:
                self._entries[index] = replace(found, enabled=found.enabled or entry.enabled)
                return DuplicateError(
                    f"重复的域名条目: {entry.domain} -> {entry.address}"
                )

        for index, found in enumerate(self._entries):
            if found.domain == entry.domain and found.is_ipv6 == entry.is_ipv6:
                self._entries[index] = entry
                return ConflictError(
                    f"域名条目冲突: {entry.domain} -> "
                    f"{entry.address}（替换 {found.address}）"
                )

        self._entries.append(entry)
        return None

    # 查找

    def contains(self, entry: HostEntry) -> bool:
        return self.index_of(entry) > -1

    def contains_domain(self, domain: str) -> bool:
        return any(entry.domain == domain for entry in self._entries)

    def contains_address(self, address: Union[str, IPAddress]) -> bool:
        address = _as_address(address)
        return any(entry.address == address for entry in self._entries)

    def index_of(self, entry: HostEntry) -> int:
        """返回相同条目的位置，找不到时返回 -1"""
        for index, found in enumerate(self._entries):
            if found == entry:
                return index
        return -1

    def index_of_domain_family(self, domain: str, family: Union[Family, int]) -> int:
        """
        返回域名和地址族都匹配的条目位置，找不到时返回 -1

        异常:
            InvalidFamilyError: 如果地址族不是 4 或 6
        """
        is_ipv6 = check_family(family) == Family.IPV6
        for index, found in enumerate(self._entries):
            if found.domain == domain and found.is_ipv6 == is_ipv6:
                return index
        return -1

    def find_domain_family(self, domain: str, family: Union[Family, int]) -> Optional[HostEntry]:
        """返回域名和地址族都匹配的条目（最多一个），找不到时返回 None"""
        index = self.index_of_domain_family(domain, family)
        if index < 0:
            return None
        return self._entries[index]

    # 删除

    def remove(self, index: int) -> int:
        """删除指定位置的条目，越界时不做任何事。返回删除数量（0 或 1）"""
        if -1 < index < len(self._entries):
            del self._entries[index]
            return 1
        return 0

    def remove_domain(self, domain: str) -> int:
        """删除该域名的 IPv4 和 IPv6 条目，返回删除数量"""
        return (
            self.remove_domain_family(domain, Family.IPV4)
            + self.remove_domain_family(domain, Family.IPV6)
        )

    def remove_domain_family(self, domain: str, family: Union[Family, int]) -> int:
        return self.remove(self.index_of_domain_family(domain, family))

    # 启用 / 禁用

    def enable(self, domain: str) -> None:
        self._set_enabled(domain, None, True)

    def disable(self, domain: str) -> None:
        self._set_enabled(domain, None, False)

    def enable_family(self, domain: str, family: Union[Family, int]) -> None:
        self._set_enabled(domain, check_family(family), True)

    def disable_family(self, domain: str, family: Union[Family, int]) -> None:
        self._set_enabled(domain, check_family(family), False)

    def _set_enabled(self, domain: str, family: Optional[Family], enabled: bool) -> None:
        """
        修改第一个匹配条目的 enabled 状态

        异常:
            NotFoundError: 如果没有匹配的条目
        """
        if family is None:
            index = next(
                (i for i, found in enumerate(self._entries) if found.domain == domain),
                -1
            )
        else:
            index = self.index_of_domain_family(domain, family)

        if index < 0:
            raise NotFoundError(f"找不到域名: {domain}")
        self._entries[index] = replace(self._entries[index], enabled=enabled)

    # 过滤

    def filter_by_address(self, address: Union[str, IPAddress]) -> List[HostEntry]:
        address = _as_address(address)
        return [entry for entry in self._entries if entry.address == address]

    def filter_by_domain(self, domain: str) -> List[HostEntry]:
        return [entry for entry in self._entries if entry.domain == domain]

    def filter_by_domain_family(self, domain: str, family: Union[Family, int]) -> List[HostEntry]:
        """列表形式的 find_domain_family，结果最多一个条目"""
        entry = self.find_domain_family(domain, family)
        return [entry] if entry is not None else []

    def unique_addresses(self) -> List[IPAddress]:
        """排序后按首次出现顺序返回不重复的地址"""
        self.sort()
        seen = set()
        in_order: List[IPAddress] = []
        for entry in self._entries:
            if entry.address not in seen:
                seen.add(entry.address)
                in_order.append(entry.address)
        return in_order

    # 格式化

    def format_unix(self) -> str:
        """
        格式化为 /etc/hosts 风格：每个地址一行，域名以空格分隔

        同一地址既有启用又有禁用的域名时输出两行，禁用行以 "# " 开头。
        127.* 排在最前，localhost 总是排在同一地址的第一个。
        """
        lines = []
        for address in self.unique_addresses():
            enabled_domains = []
            disabled_domains = []
            for entry in self.filter_by_address(address):
                if entry.enabled:
                    enabled_domains.append(entry.domain)
                else:
                    disabled_domains.append(entry.domain)

            if enabled_domains:
                lines.append(f"{address} {' '.join(enabled_domains)}\n")
            if disabled_domains:
                lines.append(f"# {address} {' '.join(disabled_domains)}\n")

        return "".join(lines)

    def format_windows(self) -> str:
        """格式化为每个条目一行"""
        self.sort()
        return "".join(f"{entry.to_hosts_line()}\n" for entry in self._entries)

    def format(self, output_format: OutputFormat = OutputFormat.UNIX) -> str:
        """按指定格式输出，默认使用 Unix 格式"""
        if output_format is OutputFormat.WINDOWS:
            return self.format_windows()
        return self.format_unix()

    # 导出 / 导入

    def dump(self) -> str:
        """以 JSON 导出所有条目（保持当前顺序）"""
        return json.dumps(
            [entry.to_dict() for entry in self._entries],
            indent=2,
            ensure_ascii=False
        )

    def apply(self, data: Union[str, bytes]) -> None:
        """
        从 JSON 导入条目，逐个经过 add 合并

        重复/冲突以及无效条目都会被静默丢弃。

        异常:
            ParseError: 如果 JSON 无效或顶层不是数组
        """
        try:
            records = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as e:
            raise ParseError(f"无效的 JSON: {e}") from e

        if not isinstance(records, list):
            raise ParseError("导入的 JSON 顶层必须是数组")

        for record in records:
            try:
                entry = HostEntry.from_dict(record)
            except ParseError:
                continue
            self.add(entry)


def _as_address(address: Union[str, IPAddress]) -> IPAddress:
    if isinstance(address, str):
        return parse_address(address)
    return address
