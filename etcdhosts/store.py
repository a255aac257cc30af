"""
hosts 存储接口

HostsStore 描述核心与分布式存储之间的约定：固定键下保存序列化后的
hosts 文本，支持按修订号读取和历史查询。核心只关心文本进、文本出。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from etcdhosts.errors import KeyNotFoundError, StoreError


@dataclass(frozen=True)
class HostsVersion:
    """
    某一次写入的 hosts 快照

    属性:
        revision: 写入时存储的全局修订号
        version: 该键自创建以来的版本号
        hosts: 保存的 hosts 文本
    """

    revision: int
    version: int
    hosts: str


class HostsStore(ABC):
    """固定键的 hosts 存储"""

    def get_hosts(self) -> str:
        """读取最新的 hosts 文本"""
        return self.get_hosts_with_revision(None)

    @abstractmethod
    def get_hosts_with_revision(self, revision: Optional[int]) -> str:
        """
        读取指定修订号时的 hosts 文本，revision 为 None 时读取最新值

        异常:
            KeyNotFoundError: 如果键不存在
            StoreError: 如果修订号无效或读取失败
        """

    @abstractmethod
    def get_hosts_history(self) -> List[HostsVersion]:
        """返回所有历史版本，按 version 降序"""

    @abstractmethod
    def put_hosts(self, hosts: str) -> None:
        """保存新的 hosts 文本"""


class MemoryStore(HostsStore):
    """
    内存中的 HostsStore 实现

    按 etcd 的语义维护修订号：每次写入全局 revision 加一，
    键的 version 从 1 开始递增。不是线程安全的。
    """

    def __init__(self, key: str = "/etcdhosts"):
        self.key = key
        self.revision = 0
        self._history: List[HostsVersion] = []

    def get_hosts_with_revision(self, revision: Optional[int]) -> str:
        if not self._history:
            raise KeyNotFoundError(f"hosts 不存在, key: {self.key}")

        if revision is None or revision < 0:
            return self._history[-1].hosts

        if revision == 0 or revision > self.revision:
            raise StoreError(f"无效的修订号 {revision}, key: {self.key}")

        found = self._history[0]
        for item in self._history:
            if item.revision > revision:
                break
            found = item
        return found.hosts

    def get_hosts_history(self) -> List[HostsVersion]:
        if not self._history:
            raise KeyNotFoundError(f"hosts 不存在, key: {self.key}")
        return sorted(self._history, key=lambda v: v.version, reverse=True)

    def put_hosts(self, hosts: str) -> None:
        if not isinstance(hosts, str):
            raise StoreError(f"hosts 必须是文本, key: {self.key}")
        self.revision += 1
        self._history.append(HostsVersion(
            revision=self.revision,
            version=len(self._history) + 1,
            hosts=hosts
        ))
