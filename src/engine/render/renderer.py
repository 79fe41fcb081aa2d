"""
どこで: `engine.render` の高レベル描画。
何を: SwapBuffer の `GroupSnapshot` をレイヤーへ変換し、ModernGL に転送して線を描画。
なぜ: 毎フレームのアップロード/描画/リソース寿命を一箇所に集約し、描画処理を単純化するため。
"""

from __future__ import annotations

import logging
from typing import Any

import moderngl as mgl
import numpy as np

from engine.core.geometry import Geometry
from engine.kinematics.snapshot import GroupSnapshot
from util.constants import PRIMITIVE_RESTART_INDEX

from ..core.tickable import Tickable
from ..runtime.buffer import SwapBuffer
from .layers import build_layers
from .line_mesh import LineMesh
from .shader import Shader
from .style import RenderStyle
from .types import Layer

logger = logging.getLogger(__name__)


class TraceRenderer(Tickable):
    """
    SwapBuffer から新しいスナップショットを取り込み（tick）、レイヤーごとに GPU へ送って
    描画する（draw）。取り込みはスナップショットが変わったときだけ行う。
    """

    def __init__(
        self,
        mgl_context: Any,
        projection_matrix: np.ndarray,
        swap_buffer: SwapBuffer[GroupSnapshot],
        style: RenderStyle | None = None,
        *,
        origin: tuple[float, float] = (0.0, 0.0),
    ):
        self.ctx = mgl_context
        self.swap_buffer = swap_buffer
        self._style = style or RenderStyle()
        self._origin = (float(origin[0]), float(origin[1]))

        self.line_program = Shader.create_shader(mgl_context)
        self.line_program["projection"].write(projection_matrix.tobytes())
        self.line_program["line_thickness"].value = float(self._style.line_thickness)
        self.line_program["color"].value = self._style.trace_color

        # レイヤー名ごとにメッシュを持ち、アップロードは取り込み時のみ
        self._meshes: dict[str, LineMesh] = {}
        self._layers: list[Layer] = []
        self._snapshot: GroupSnapshot | None = None
        self._last_vertex_count = 0
        self._last_line_count = 0

    @property
    def style(self) -> RenderStyle:
        return self._style

    # -------- Tickable interface --------
    def tick(self, dt: float) -> None:
        """SwapBuffer に新データがあれば取り込み、レイヤーを作り直して GPU へ転送。"""
        if self.swap_buffer.try_swap():
            self._snapshot = self.swap_buffer.get_front()
            self._rebuild()

    # -------- Public drawing API --------
    def draw(self) -> None:
        """GPU に送ったレイヤーを順に描画する。"""
        for layer in self._layers:
            mesh = self._meshes.get(layer.name or "")
            if mesh is None or mesh.index_count == 0:
                continue
            if layer.color is not None:
                self.line_program["color"].value = layer.color
            if layer.thickness is not None:
                self.line_program["line_thickness"].value = float(layer.thickness)
            mesh.vao.render(mgl.LINE_STRIP, mesh.index_count)

    def set_style(self, style: RenderStyle) -> None:
        self._style = style
        self._rebuild()

    def toggle_apparatus(self) -> bool:
        """外円/内円/アームの表示を切り替え、新しい表示状態を返す。"""
        self.set_style(self._style.with_apparatus(not self._style.show_apparatus))
        return self._style.show_apparatus

    def release(self) -> None:
        """GPU リソースを解放。"""
        for mesh in self._meshes.values():
            mesh.release()
        self._meshes.clear()
        self.line_program.release()

    def get_last_counts(self) -> tuple[int, int]:
        """直近アップロードの頂点数/ライン数。"""
        return int(self._last_vertex_count), int(self._last_line_count)

    # -------- Internal helpers --------
    def _mesh_for(self, name: str) -> LineMesh:
        mesh = self._meshes.get(name)
        if mesh is None:
            mesh = LineMesh(
                ctx=self.ctx,
                program=self.line_program,
                primitive_restart_index=PRIMITIVE_RESTART_INDEX,
            )
            self._meshes[name] = mesh
        return mesh

    def _rebuild(self) -> None:
        if self._snapshot is None:
            self._layers = []
            return
        self._layers = build_layers(self._snapshot, self._style, origin=self._origin)
        active = {layer.name for layer in self._layers}
        for name, mesh in self._meshes.items():
            if name not in active:
                mesh.index_count = 0
        total_verts = total_lines = 0
        for layer in self._layers:
            verts, inds = _geometry_to_vertices_indices(layer.geometry, PRIMITIVE_RESTART_INDEX)
            self._mesh_for(layer.name or "").upload(verts, inds)
            total_verts += layer.geometry.n_vertices
            total_lines += layer.geometry.n_lines
        self._last_vertex_count = total_verts
        self._last_line_count = total_lines
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "uploaded snapshot v%d: layers=%d verts=%d",
                self._snapshot.version,
                len(self._layers),
                total_verts,
            )


# ---------- utility -------------------------------------------------------- #
def _geometry_to_vertices_indices(
    geometry: Geometry,
    primitive_restart_index: int,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Geometry を 1 つの VBO/IBO に変換する。
    各ポリラインの終端直後に primitive restart を挿入し、1 回の LINE_STRIP で全線を描く。
    """
    coords = geometry.coords
    offsets = geometry.offsets

    num_lines = len(offsets) - 1
    total_verts = len(coords)
    total_inds = total_verts + num_lines

    indices = np.empty(total_inds, dtype=np.uint32)
    # 再始動位置（各ライン終端の直後）: offsets[1:] + 行番号
    restart_pos = offsets[1:].astype(np.int64) + np.arange(num_lines, dtype=np.int64)
    mask = np.zeros(total_inds, dtype=bool)
    mask[restart_pos] = True
    indices[~mask] = np.arange(total_verts, dtype=np.uint32)
    indices[mask] = np.uint32(primitive_restart_index)
    return coords, indices


__all__ = ["TraceRenderer"]
