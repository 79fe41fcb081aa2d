"""
どこで: `api.sketch_runner.render`
何を: RenderWindow/ModernGL/TraceRenderer の初期化。
なぜ: `api.sketch` を薄くし、描画初期化の責務を分離するため。
"""

from __future__ import annotations

import moderngl

from engine.kinematics.snapshot import GroupSnapshot
from engine.render.style import RenderStyle
from engine.runtime.buffer import SwapBuffer


def create_window_and_renderer(
    window_width: int,
    window_height: int,
    *,
    style: RenderStyle,
    projection_matrix,
    swap_buffer: SwapBuffer[GroupSnapshot],
    origin: tuple[float, float],
):
    """ウィンドウ/ModernGL/TraceRenderer を生成して返す。

    Returns
    -------
    (rendering_window, mgl_ctx, trace_renderer)
    """

    from engine.core.render_window import RenderWindow
    from engine.render.renderer import TraceRenderer

    rendering_window = RenderWindow(window_width, window_height, bg_color=style.background)

    mgl_ctx: moderngl.Context = moderngl.create_context()
    mgl_ctx.enable(moderngl.BLEND)
    mgl_ctx.blend_func = (moderngl.SRC_ALPHA, moderngl.ONE_MINUS_SRC_ALPHA)

    trace_renderer = TraceRenderer(
        mgl_context=mgl_ctx,
        projection_matrix=projection_matrix,
        swap_buffer=swap_buffer,
        style=style,
        origin=origin,
    )
    return rendering_window, mgl_ctx, trace_renderer


__all__ = ["create_window_and_renderer"]
