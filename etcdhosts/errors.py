"""
etcdhosts 错误类型

ParseError、NotFoundError、InvalidFamilyError 以异常方式抛出；
DuplicateError 与 ConflictError 只作为 HostList.add 的诊断返回值，
返回时合并已经完成。
"""


class HostsError(Exception):
    """所有 etcdhosts 错误的基类"""


class ParseError(HostsError):
    """行、地址或域名无法解析"""


class DuplicateError(HostsError):
    """添加了已存在的条目（enabled 状态已合并）"""


class ConflictError(HostsError):
    """同一域名同一地址族出现不同地址（旧条目已被替换）"""


class NotFoundError(HostsError):
    """找不到目标域名"""


class InvalidFamilyError(HostsError, ValueError):
    """地址族参数不是 IPv4 或 IPv6"""

    def __init__(self, family: object):
        super().__init__(f"地址族必须是 4 或 6，收到: {family!r}")
        self.family = family


class StoreError(HostsError):
    """存储后端读写失败"""


class KeyNotFoundError(StoreError):
    """存储中还没有 hosts 键"""
