"""时间处理工具"""

from datetime import datetime, timedelta


def now() -> datetime:
    """获取当前时间"""
    return datetime.now()


def next_midnight(dt: datetime) -> datetime:
    """给定时间之后的第一个零点"""
    return datetime.combine(dt.date() + timedelta(days=1), datetime.min.time())
