from __future__ import annotations

from api import run_hypocycloid
from common.logging import setup_default_logging

# 外円/内円の比 31 : 12.3398748789 の主軌跡に、傾けた外円で evolving 軸のトラッカーを重ねる
TRACKERS = [
    {"name": "main", "inner_radius": 15.0, "outer_radius": 15.0 * 31 / 12.3398748789},
    {
        "name": "tilted",
        "inner_radius": 9.0,
        "outer_radius": 30.0,
        "revolution_rate": 0.03,
        "axis_mode": "evolving",
        "tilt": {"axis": [1, 0, 0], "angle_deg": 20},
    },
]


if __name__ == "__main__":
    setup_default_logging()
    run_hypocycloid(TRACKERS)
