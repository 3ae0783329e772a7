"""
工具函数模块

提供通用的工具函数，如随机码、唯一编号、AppId/Secret 生成、字符串掩码、查询条件解析等。
"""

import json
import logging
import secrets
import string
import time
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any, Iterable, Mapping, Union

logger = logging.getLogger(__name__)

_HEX_DIGITS = "0123456789abcdef"


def uniqid(more_entropy: bool = False) -> str:
    """
    生成基于当前时间的 13 位十六进制唯一 ID

    前 8 位为秒数，后 5 位为微秒数。

    Args:
        more_entropy: 为 True 时追加 ".<8 位随机数字>"，长度变为 22

    Returns:
        str: 形如 "65f1a2b30c1d2" 的字符串
    """
    now = time.time()
    seconds = int(now)
    micros = int((now - seconds) * 1_000_000)
    value = f"{seconds:08x}{micros:05x}"
    if more_entropy:
        value += "." + random_number(8)
    return value


def normalize_params(reserve: Iterable[str], values: Mapping[str, Any]) -> dict[str, Any]:
    """
    标准化参数

    仅保留 reserve 中列出且存在于 values 中的键，顺序与 reserve 一致；
    值为 None 时替换为空字符串。

    Args:
        reserve: 需要保留的键
        values: 原始参数

    Returns:
        dict: 标准化后的参数（新字典）
    """
    normalized = {}
    for key in reserve:
        if key in values:
            value = values[key]
            normalized[key] = "" if value is None else value
    return normalized


def get_random_num(length: int) -> str:
    """
    获取格式化的随机数，不足位数补零

    Args:
        length: 位数

    Returns:
        str: 取值范围 [1, 10**length - 1] 的随机数，左侧补零至 length 位
    """
    upper = 10 ** length - 1
    return str(secrets.randbelow(upper) + 1).zfill(length)


def random_number(digit: int = 6) -> str:
    """
    获取随机码

    Args:
        digit: 位数

    Returns:
        str: 由 digit 个随机数字组成的字符串
    """
    return "".join(secrets.choice(string.digits) for _ in range(digit))


def create_unique_no(id: int, num_length: int, prefix: str = "") -> str:
    """
    根据自增 id 生成唯一编号

    Args:
        id: 自增 id
        num_length: 数字部分长度
        prefix: 前缀

    Returns:
        str: 长度恒为 len(prefix) + num_length 的编号

    Example:
        >>> create_unique_no(42, 6, "NO")
        'NO000042'
    """
    digital = str(id % (10 ** num_length)).zfill(num_length)
    return f"{prefix}{digital}"


def build_unique_no() -> str:
    """
    生成唯一订单号

    当天日期（YYYYMMDD）拼接 uniqid 后 6 位字符编码的前 8 位。

    Returns:
        str: 16 位订单号
    """
    tail = uniqid()[7:13]
    codes = "".join(str(ord(ch)) for ch in tail)
    return datetime.now().strftime("%Y%m%d") + codes[:8]


def number_format(number: Union[int, float, str, Decimal], digit: int = 2) -> str:
    """
    数字位数格式化

    四舍五入（half-up），小数点为 "."，无千分位分隔符。

    Args:
        number: 数字
        digit: 小数位数

    Returns:
        str: 格式化后的数字
    """
    quantum = Decimal(1).scaleb(-digit)
    value = Decimal(str(number))
    with localcontext() as ctx:
        # 精度需覆盖整数位与小数位，否则 quantize 抛出 InvalidOperation
        ctx.prec = max(ctx.prec, value.adjusted() + digit + 2)
        value = value.quantize(quantum, rounding=ROUND_HALF_UP)
    return format(value, "f")


def _random_hex(count: int) -> str:
    return "".join(secrets.choice(_HEX_DIGITS) for _ in range(count))


def build_app_id(prefix: str = "zm", length: int = 14) -> str:
    """
    生成 appid

    前缀 + 当前时间戳的 8 位十六进制，不足 length 时以随机十六进制字符补齐。

    Args:
        prefix: 前缀
        length: 返回长度

    Returns:
        str: appid
    """
    app_id = f"{prefix}{int(time.time()):08x}"
    return app_id + _random_hex(length - len(app_id))


def build_app_secret(length: int = 24, prefix: str = "ZJ") -> str:
    """
    生成 secret

    反转的 8 位十六进制时间戳 + 前缀各字符编码的十六进制 + 随机十六进制字符，截断至 length。

    Args:
        length: 返回长度
        prefix: 前缀

    Returns:
        str: secret
    """
    secret = f"{int(time.time()):08x}"[::-1]
    secret += "".join(f"{ord(ch):x}" for ch in prefix)
    secret += _random_hex(length - len(secret))
    return secret[:length]


def str_asterisk(s: str, pre: int, back: int) -> str:
    """
    字符串星号隐藏重要部分

    Args:
        s: 原字符串
        pre: 保留的头部字符数
        back: 保留的尾部字符数

    Returns:
        str: 加星后的字符串；长度不足 pre + back 时返回空字符串

    Example:
        >>> str_asterisk("13812345678", 3, 4)
        '138****5678'
    """
    length = len(s)
    if length < pre + back:
        return ""
    return s[:pre] + "*" * (length - pre - back) + s[length - back:]


def decode_search_query(request: Mapping[str, Any]) -> dict[str, Any]:
    """
    解析查询条件

    从请求参数的 condition 字段中解析 JSON 对象。

    Args:
        request: 请求参数（如 query_params）

    Returns:
        dict: 查询条件；缺失、为空、非法 JSON 或非对象时返回空字典
    """
    search = request.get("condition") if request else None
    if not search:
        return {}
    try:
        decoded = json.loads(search)
    except (TypeError, ValueError):
        logger.debug("Ignoring undecodable search condition: %r", search)
        return {}
    return decoded if isinstance(decoded, dict) else {}
