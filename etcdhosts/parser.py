"""
hosts 行解析模块
"""

from typing import List

from etcdhosts.errors import ParseError
from etcdhosts.models import HostEntry, new_host_entry


def parse_line(line: str) -> List[HostEntry]:
    """
    解析 hosts 文件中的一行，一行可以包含一个（可能被注释的）地址和多个域名

    例如:
        127.0.0.1 localhost mysite1 mysite2
        # 10.0.0.1 disabled-host   # 行内注释

    以 # 开头（忽略前导空白）的行视为禁用；其余的 # 之后都是注释。
    只有地址没有域名的行返回空列表。

    参数:
        line: 原始行文本

    返回:
        HostEntry 列表

    异常:
        ParseError: 空行，或任一域名/地址无效（整行丢弃）
    """
    if not line:
        raise ParseError("空行")

    enabled = True
    line = line.lstrip()
    if line.startswith("#"):
        enabled = False
        line = line[1:].strip()

    # 行内注释
    line = line.split("#", 1)[0]

    # 只按空格切分，其他空白字符属于域名本身
    words = [word.strip() for word in line.replace("\t", " ").split(" ")]
    words = [word for word in words if word]
    if not words:
        return []

    address, domains = words[0], words[1:]
    return [new_host_entry(domain, address, enabled) for domain in domains]
