"""
どこで: `engine.render` サブパッケージ。
何を: スナップショット → レイヤー変換と GPU 転送・描画の入口（TraceRenderer/LineMesh/Shader）。
なぜ: 運動学コアと描画の責務を分離し、GPU リソース管理を局所化するため。
"""
