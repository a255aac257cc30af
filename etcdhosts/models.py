"""
etcdhosts 数据模型
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Union

from etcdhosts.address import Family, IPAddress, parse_address
from etcdhosts.errors import ParseError

# 空格、制表符、# 以及 str.splitlines 认作换行的字符
_FORBIDDEN_DOMAIN_CHARS = frozenset(" \t#\n\r\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029")


@dataclass(frozen=True)
class HostEntry:
    """
    代表 hosts 文件中的单个域名绑定

    属性:
        domain: 域名，按 UTF-8 字节比较，不做大小写折叠
        address: 已校验的 IPv4 / IPv6 地址
        enabled: False 表示输出时被注释掉，但仍然被跟踪

    相等性只取决于 domain 和 address（地址族随 address 确定），
    enabled 是可合并的状态，不参与比较。
    """

    domain: str
    address: IPAddress
    enabled: bool = field(default=True, compare=False)

    @property
    def is_ipv6(self) -> bool:
        return self.address.version == 6

    @property
    def family(self) -> Family:
        return Family(self.address.version)

    def to_hosts_line(self) -> str:
        """
        转换为单条目 hosts 行格式

        格式: <IP> <域名>，禁用时加 "# " 前缀

        返回:
            格式化的 hosts 文件行
        """
        line = f"{self.address} {self.domain}"
        if not self.enabled:
            return f"# {line}"
        return line

    def to_dict(self) -> Dict[str, Any]:
        return {
            "domain": self.domain,
            "ip": str(self.address),
            "enabled": self.enabled,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HostEntry":
        """
        从导出格式还原条目，"address" 可代替 "ip"

        异常:
            ParseError: 如果字段缺失或无效
        """
        if not isinstance(data, dict):
            raise ParseError(f"条目必须是对象: {data!r}")
        address = data.get("ip", data.get("address"))
        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ParseError(f"enabled 必须是布尔值: {enabled!r}")
        return new_host_entry(data.get("domain"), address, enabled)

    def __str__(self) -> str:
        state = "" if self.enabled else " (禁用)"
        return f"{self.domain} -> {self.address}{state}"


def new_host_entry(
    domain: str,
    address: Union[str, IPAddress],
    enabled: bool = True
) -> HostEntry:
    """
    校验并创建 HostEntry

    参数:
        domain: 域名，不能为空
        address: IP 地址文本或已解析的地址对象
        enabled: 是否启用

    返回:
        新的 HostEntry

    异常:
        ParseError: 如果域名为空、包含空白或 #，或地址无效
    """
    if not isinstance(domain, str) or not domain:
        raise ParseError(f"域名不能为空 (地址: {address})")
    if domain != domain.strip() or any(ch in _FORBIDDEN_DOMAIN_CHARS for ch in domain):
        raise ParseError(f"域名包含空白、换行或 #: {domain!r}")
    if not isinstance(address, str):
        address = str(address) if address is not None else ""
    return HostEntry(domain=domain, address=parse_address(address), enabled=bool(enabled))
