from datetime import UTC, datetime


class Datetime:
    """
    统一的时间处理工具类
    核心原则：
    1. 系统内部（数据库、逻辑处理）统一使用 UTC 时区
    2. 所有 datetime 对象必须带有时区信息 (Timezone-aware)
    """

    @staticmethod
    def now() -> datetime:
        """
        获取当前 UTC 时间（带时区信息）
        替代 datetime.now() 或 datetime.utcnow()
        """
        return datetime.now(UTC)
