"""
どこで: `engine.core` サブパッケージ。
何を: 四元数・剛体フレーム・Geometry・フレーム駆動（Tickable/FrameClock/SimulationClock）・描画ウィンドウを提供。
なぜ: 計算と描画の基盤を構成し、上位層（Kinematics/Runtime/Render）から再利用可能にするため。
"""
