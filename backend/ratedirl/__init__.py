"""
RatedIRL 核心业务包
提供账户、画像、评价、提名邀请、审核与动态流的领域逻辑
"""

__version__ = "0.1.0"
