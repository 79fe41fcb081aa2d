"""
どこで: `engine.render.shader`
何を: 太さ指定付きライン描画用の GLSL プログラム（頂点/ジオメトリ/フラグメント）を生成。
なぜ: コアプロファイルでは glLineWidth が効かないため、ジオメトリシェーダで線分を
      四角形へ展開して太さを表現する。

uniform:
- `projection` (mat4): キャンバス座標 → クリップ空間。
- `line_thickness` (float): クリップ空間での線幅。
- `color` (vec4): RGBA 0–1。
"""

from __future__ import annotations

from typing import Any

VERTEX_SHADER = """
#version 330
in vec3 in_vert;
uniform mat4 projection;
void main() {
    gl_Position = projection * vec4(in_vert, 1.0);
}
"""

GEOMETRY_SHADER = """
#version 330
layout(lines) in;
layout(triangle_strip, max_vertices = 4) out;
uniform float line_thickness;
void main() {
    vec4 p0 = gl_in[0].gl_Position;
    vec4 p1 = gl_in[1].gl_Position;
    vec2 dir = p1.xy - p0.xy;
    float len = length(dir);
    if (len < 1e-9) {
        return;
    }
    vec2 n = vec2(-dir.y, dir.x) / len * (line_thickness * 0.5);
    gl_Position = p0 + vec4(n, 0.0, 0.0); EmitVertex();
    gl_Position = p0 - vec4(n, 0.0, 0.0); EmitVertex();
    gl_Position = p1 + vec4(n, 0.0, 0.0); EmitVertex();
    gl_Position = p1 - vec4(n, 0.0, 0.0); EmitVertex();
    EndPrimitive();
}
"""

FRAGMENT_SHADER = """
#version 330
uniform vec4 color;
out vec4 frag_color;
void main() {
    frag_color = color;
}
"""


class Shader:
    @staticmethod
    def create_shader(ctx: Any) -> Any:
        """ModernGL コンテキストにライン用プログラムを作って返す。"""
        return ctx.program(
            vertex_shader=VERTEX_SHADER,
            geometry_shader=GEOMETRY_SHADER,
            fragment_shader=FRAGMENT_SHADER,
        )


__all__ = ["Shader"]
