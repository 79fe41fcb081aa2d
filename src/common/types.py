"""
どこで: `common` の型定義。
何を: 3 次元ベクトルと四元数のタプル別名。
なぜ: 設定値やフレーム引数の注釈を最内層で共有し、循環 import を避けるため。
"""

Vec3 = tuple[float, float, float]
# 四元数は (w, x, y, z) の順
Quat = tuple[float, float, float, float]


__all__ = ["Vec3", "Quat"]
