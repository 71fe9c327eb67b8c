"""数据库基础模型导出。

仅提供 Base 定义；建表由应用启动钩子按配置执行。
"""

from todo_api.models.base import Base

__all__ = ["Base"]
