"""
どこで: `shapes` パッケージ（解析曲線）。
何を: 外円の内側を転がる円上の点が描く閉形式曲線 `hypotrochoid_at` を提供する。
なぜ: 逐次回転で積み上げるトラッカーの軌跡を、運動学コアから独立した解析解と
      突き合わせるため。
"""

from .hypotrochoid import hypotrochoid_at

__all__ = ["hypotrochoid_at"]
