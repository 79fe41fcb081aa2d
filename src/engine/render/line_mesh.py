"""
どこで: `engine.render` の低レベルメッシュ層。
何を: VBO/IBO/VAO の確保・更新・解放を担当し、描画可能な LineMesh を管理。
なぜ: GPU 転送の詳細を Renderer から切り離し、再確保や VAO の張り直しを一元化するため。
"""

from __future__ import annotations

from typing import Any

import numpy as np


class LineMesh:
    """
    ポリライン頂点（VBO）と primitive restart 付きインデックス（IBO）を GPU に保持する。
    軌跡は tick ごとに伸びるため、容量不足時のみ再確保する。
    """

    def __init__(
        self,
        ctx: Any,
        program: Any,
        # 初期GPUメモリ確保量（既定: 1MB）。必要に応じて自動拡張。
        initial_reserve: int = 1024 * 1024,
        primitive_restart_index: int = 0xFFFFFFFF,
    ):
        self.ctx = ctx
        self.program = program
        self.initial_reserve = initial_reserve
        self.primitive_restart_index = primitive_restart_index

        self.vbo = ctx.buffer(reserve=initial_reserve, dynamic=True)
        self.ibo = ctx.buffer(reserve=initial_reserve, dynamic=True)
        self.vao = ctx.simple_vertex_array(program, self.vbo, "in_vert", index_buffer=self.ibo)

        self.index_count: int = 0
        self.ctx.primitive_restart = True  # type: ignore
        self.ctx.primitive_restart_index = primitive_restart_index  # type: ignore

    # ---------- バッファ操作 ----------
    def _ensure_capacity(self, vbo_size: int, ibo_size: int) -> None:
        """データが大きくなったら倍々で再確保し、VAO を張り直す。"""
        grown = False
        if vbo_size > self.vbo.size:
            reserve = max(vbo_size, 2 * self.vbo.size)
            self.vbo.release()
            self.vbo = self.ctx.buffer(reserve=reserve, dynamic=True)
            grown = True
        if ibo_size > self.ibo.size:
            reserve = max(ibo_size, 2 * self.ibo.size)
            self.ibo.release()
            self.ibo = self.ctx.buffer(reserve=reserve, dynamic=True)
            grown = True
        if grown:
            self.vao.release()
            self.vao = self.ctx.simple_vertex_array(
                self.program, self.vbo, "in_vert", index_buffer=self.ibo
            )

    def upload(self, vertices: np.ndarray, indices: np.ndarray) -> None:
        """頂点とインデックスを GPU へ書き込む。"""
        self._ensure_capacity(vertices.nbytes, indices.nbytes)
        self.vbo.orphan()
        self.vbo.write(vertices.tobytes())
        self.ibo.orphan()
        self.ibo.write(indices.tobytes())
        self.index_count = len(indices)

    def release(self) -> None:
        """GPUのメモリを解放する（終了時に使う）"""
        self.vbo.release()
        self.ibo.release()
        self.vao.release()
