"""
地址分类模块

判断文本是 IPv4、IPv6 还是无效地址，并计算仅用于排序的回环替代地址。
"""

import ipaddress
from enum import IntEnum
from typing import Optional, Union

from etcdhosts.errors import InvalidFamilyError, ParseError

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


class Family(IntEnum):
    """地址族"""

    IPV4 = 4
    IPV6 = 6


def check_family(family: Union[Family, int]) -> Family:
    """
    校验地址族参数

    参数:
        family: Family 或整数 4 / 6

    返回:
        对应的 Family

    异常:
        InvalidFamilyError: 如果不是 4 或 6
    """
    try:
        return Family(family)
    except (ValueError, TypeError):
        raise InvalidFamilyError(family) from None


def parse_address(token: str) -> IPAddress:
    """
    严格解析 IP 地址：先尝试点分 IPv4，再尝试 IPv6

    带作用域的 IPv6（如 fe80::1%lo0）视为无效。

    异常:
        ParseError: 如果既不是 IPv4 也不是 IPv6
    """
    if not isinstance(token, str) or not token:
        raise ParseError(f"无效的 IP 地址: {token!r}")
    try:
        return ipaddress.IPv4Address(token)
    except ValueError:
        pass
    if "%" not in token:
        try:
            return ipaddress.IPv6Address(token)
        except ValueError:
            pass
    raise ParseError(f"无效的 IP 地址: {token!r}")


def classify(token: str) -> Optional[Family]:
    """返回 token 的地址族，无效时返回 None"""
    try:
        address = parse_address(token)
    except ParseError:
        return None
    return Family(address.version)


def loopback_surrogate(address: IPAddress) -> IPAddress:
    """
    将 127.x.x.x 映射为 0.x.x.x，让回环地址在同一地址族内排在最前

    只用作排序键，不会被保存或显示。其他地址原样返回。
    """
    if address.version == 4:
        packed = address.packed
        if packed[0] == 127:
            return ipaddress.IPv4Address(b"\x00" + packed[1:])
    return address
