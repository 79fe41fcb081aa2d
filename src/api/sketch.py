"""
どこで: `api.sketch`（実行ランナー）。
何を: 設定からトラッカー群と固定刻みクロックを組み立て、pyglet のループで駆動して
      ModernGL で軌跡・伴走曲線・装置を描画する。
なぜ: 運動学コアを対話的に観察できる最小のアプリケーションとしてまとめるため。

主エントリポイント:
- `run_hypocycloid(trackers=None, *, canvas_size=None, render_scale=None, fps=None, ...)`

実行フロー（概要）:
1) 設定解決: `util.utils.load_config()` の `canvas`/`simulation`/`trackers`/`render` を読み、
   引数で明示された値を優先する。
2) 組み立て: `TrackerGroup` → `SimulationClock`（固定刻み）→ `SnapshotPublisher` →
   `SwapBuffer`。ここまでは GL 非依存で、`init_only=True` ならこの段階の `SketchSetup` を返す。
3) ウィンドウ/GL: `RenderWindow` と `TraceRenderer` を生成する。
4) フレーム駆動: `FrameClock([clock, publisher, renderer])` を `pyglet.clock` で駆動する。
   tick 境界でのみスナップショットを発行し、描画側は常に完全な状態だけを見る。
5) キー入力: `SketchControls` へ委譲（UP/DOWN 速度、LEFT/RIGHT 刻み間隔、R/O/A/ESC）。

ワールド座標は外円中心を原点とし、描画時にキャンバス中心へ平行移動する。

例:
    from api import run_hypocycloid
    run_hypocycloid([{"inner_radius": 15, "outer_radius": 37.68, "revolution_rate": -0.05}])

注意/制限:
- ヘッドレス/仮想環境では `pyglet`/`ModernGL` の初期化に失敗する（例外はそのまま送出）。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from engine.core.sim_clock import SimulationClock
from engine.kinematics.group import TrackerGroup
from engine.kinematics.snapshot import GroupSnapshot
from engine.render.style import RenderStyle
from engine.runtime.buffer import SwapBuffer
from engine.runtime.publisher import SnapshotPublisher
from util.utils import config_section, load_config

from .sketch_runner.trackers import build_group
from .sketch_runner.utils import (
    build_projection,
    resolve_canvas_size,
    resolve_fps,
    resolve_window_size,
)

logger = logging.getLogger(__name__)

_CLOCK_KEYS = ("interval", "startup_delay", "min_interval", "max_interval")
_CLOCK_INT_KEYS = ("max_steps_per_frame", "max_ticks")


@dataclass
class SketchSetup:
    """GL 初期化前までに組み立てたランナーの構成要素。"""

    group: TrackerGroup
    clock: SimulationClock
    publisher: SnapshotPublisher
    swap_buffer: SwapBuffer[GroupSnapshot]
    style: RenderStyle
    canvas_size: tuple[int, int]
    window_size: tuple[int, int]
    fps: int
    rate_step: float
    interval_factor: float

    @property
    def origin(self) -> tuple[float, float]:
        """ワールド原点を置くキャンバス座標（キャンバス中心）。"""
        w, h = self.canvas_size
        return w / 2.0, h / 2.0


def _clock_kwargs(sim_cfg: Mapping[str, Any]) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    for key in _CLOCK_KEYS:
        if sim_cfg.get(key) is not None:
            kwargs[key] = float(sim_cfg[key])
    for key in _CLOCK_INT_KEYS:
        if sim_cfg.get(key) is not None:
            kwargs[key] = int(sim_cfg[key])
    return kwargs


def prepare_sketch(
    trackers: Iterable[Mapping[str, Any]] | None = None,
    *,
    canvas_size: str | tuple[int, int] | None = None,
    render_scale: float | None = None,
    fps: int | None = None,
    style: RenderStyle | None = None,
    show_offsets: bool | None = None,
    config: Mapping[str, Any] | None = None,
) -> SketchSetup:
    """設定と引数を解決し、GL 非依存の構成要素を組み立てる。

    Parameters
    ----------
    trackers : Iterable[Mapping] | None
        トラッカー設定のリスト。None で設定ファイルの `trackers:`（無ければ既定 1 本）。
    canvas_size : str | tuple[int, int] | None
        プリセット名（例: "SQUARE_100"）または `(width, height)`。None で `canvas.size`。
    render_scale : float | None
        ワールド単位 → px の倍率。None で `canvas.render_scale`（既定 6）。
    fps : int | None
        描画更新レート。None で `canvas.fps`（既定 60）。
    style : RenderStyle | None
        描画スタイル。None で `render:` セクション。
    show_offsets : bool | None
        伴走曲線の初期表示。None で `simulation.show_offsets`（無ければ `HYPO_SHOW_OFFSETS`）。
    config : Mapping | None
        設定辞書。None で `load_config()`。

    Raises
    ------
    InvalidConfiguration
        トラッカー設定が不正な場合。
    ValueError
        キャンバス/倍率/クロック設定が不正な場合。
    """
    cfg = dict(config) if config is not None else load_config()
    canvas_cfg = config_section(cfg, "canvas")
    sim_cfg = config_section(cfg, "simulation")

    canvas = resolve_canvas_size(canvas_size or canvas_cfg.get("size", "SQUARE_100"))
    scale = float(render_scale if render_scale is not None else canvas_cfg.get("render_scale", 6))
    window = resolve_window_size(canvas, scale)
    frame_rate = resolve_fps(fps, canvas_cfg)

    tracker_cfgs = trackers if trackers is not None else cfg.get("trackers")
    offsets_on = show_offsets if show_offsets is not None else sim_cfg.get("show_offsets")
    group = build_group(tracker_cfgs, show_offsets=offsets_on)

    clock = SimulationClock([group.tick], **_clock_kwargs(sim_cfg))
    swap_buffer: SwapBuffer[GroupSnapshot] = SwapBuffer()
    publisher = SnapshotPublisher(group, swap_buffer)
    # 起動遅延中も装置が見えるよう初期状態を発行しておく
    publisher.publish()

    resolved_style = style or RenderStyle.from_config(config_section(cfg, "render"))
    logger.info(
        "prepared %d tracker(s): canvas=%s window=%s fps=%d interval=%.5fs",
        len(group),
        canvas,
        window,
        frame_rate,
        clock.interval,
    )
    return SketchSetup(
        group=group,
        clock=clock,
        publisher=publisher,
        swap_buffer=swap_buffer,
        style=resolved_style,
        canvas_size=canvas,
        window_size=window,
        fps=frame_rate,
        rate_step=float(sim_cfg.get("rate_step", 0.005)),
        interval_factor=float(sim_cfg.get("interval_factor", 1.25)),
    )


def run_hypocycloid(
    trackers: Iterable[Mapping[str, Any]] | None = None,
    *,
    canvas_size: str | tuple[int, int] | None = None,
    render_scale: float | None = None,
    fps: int | None = None,
    style: RenderStyle | None = None,
    show_offsets: bool | None = None,
    config: Mapping[str, Any] | None = None,
    init_only: bool = False,
) -> SketchSetup | None:
    """トラッカー群を組み立ててウィンドウで実行する。

    引数は `prepare_sketch` と同じ。`init_only=True` では GL/ウィンドウを作らず、
    組み立て済みの `SketchSetup` を返して終了する。`ESC` でウィンドウを閉じ、
    GL リソースを解放する。
    """
    setup = prepare_sketch(
        trackers,
        canvas_size=canvas_size,
        render_scale=render_scale,
        fps=fps,
        style=style,
        show_offsets=show_offsets,
        config=config,
    )
    if init_only:
        return setup

    # 遅延インポート（ヘッドレス環境でのウィンドウ生成を避ける）
    import pyglet
    from pyglet.window import key

    from engine.core.frame_clock import FrameClock

    from .sketch_runner.controls import SketchControls
    from .sketch_runner.render import create_window_and_renderer

    canvas_width, canvas_height = setup.canvas_size
    window_width, window_height = setup.window_size
    proj = build_projection(float(canvas_width), float(canvas_height))
    rendering_window, _mgl_ctx, trace_renderer = create_window_and_renderer(
        window_width,
        window_height,
        style=setup.style,
        projection_matrix=proj,
        swap_buffer=setup.swap_buffer,
        origin=setup.origin,
    )
    rendering_window.add_draw_callback(trace_renderer.draw)

    # SimulationClock → SnapshotPublisher → Renderer の順で 1 フレームを進める
    frame_clock = FrameClock([setup.clock, setup.publisher, trace_renderer])
    pyglet.clock.schedule_interval(frame_clock.tick, 1 / setup.fps)

    controls = SketchControls(
        setup.group,
        setup.clock,
        rate_step=setup.rate_step,
        interval_factor=setup.interval_factor,
        toggle_apparatus=trace_renderer.toggle_apparatus,
        close=rendering_window.close,
    )

    @rendering_window.event
    def on_key_press(sym, mods):  # noqa: ANN001
        name = key.symbol_string(sym)
        if controls.handle_key(name):
            return pyglet.event.EVENT_HANDLED
        return None

    @rendering_window.event
    def on_close():  # noqa: ANN001
        pyglet.clock.unschedule(frame_clock.tick)
        trace_renderer.release()
        logger.info(
            "closed after %d ticks (%d frames)", setup.group.tick_count, frame_clock.frames
        )
        pyglet.app.exit()

    pyglet.app.run()
    return None


__all__ = ["SketchSetup", "prepare_sketch", "run_hypocycloid"]
