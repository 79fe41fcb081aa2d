"""
どこで: `util.constants`
何を: 描画とキャンバスに関する定数。
"""

# IBO で各ポリラインの区切りに使う primitive restart インデックス（uint32 最大値）
PRIMITIVE_RESTART_INDEX = 0xFFFFFFFF

# キャンバスプリセット（幅, 高さ）[ワールド単位]
CANVAS_SIZES: dict[str, tuple[int, int]] = {
    "SQUARE_80": (80, 80),
    "SQUARE_100": (100, 100),
    "SQUARE_200": (200, 200),
    "A5": (148, 210),
    "A5_LANDSCAPE": (210, 148),
    "A4": (210, 297),
    "A4_LANDSCAPE": (297, 210),
}
