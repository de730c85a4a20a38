# src/chip8_tracer/arch/chip8/instructions/display.py
"""
画面命令（CLS, DRW）の実装。
"""
from chip8_tracer.core.snapshot import Operation
from .base import ExecutionContext

# --- CLS ---
def execute_cls(ctx: ExecutionContext, op: Operation) -> None:
    ctx.framebuffer.clear()

# --- DRW Vx, Vy, nibble ---
# @intent:responsibility Dxyn: I から n 行のスプライトを (Vx, Vy) にXOR描画し、衝突の有無を VF に設定します。
def execute_drw(ctx: ExecutionContext, op: Operation) -> None:
    state = ctx.state
    rows = [ctx.memory.read(state.index + row) for row in range(op.n)]
    collision = ctx.framebuffer.draw_sprite(state.v[op.x], state.v[op.y], rows)
    state.vf = 1 if collision else 0
