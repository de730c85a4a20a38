# src/chip8_tracer/arch/chip8/instructions/alu.py
"""
算術論理演算命令の実装。

フラグを伴う命令はオペランドを読み出した後、VF を先に書き、最後に Vx へ結果を格納します。
したがって x == F の場合は演算結果がフラグを上書きします。
"""
from chip8_tracer.core.snapshot import Operation
from .base import ExecutionContext

# --- ADD Vx, byte ---
# @intent:responsibility 7xnn: 8bitの折り返し加算。フラグは変化しません。
def execute_add_vx_nn(ctx: ExecutionContext, op: Operation) -> None:
    ctx.state.v[op.x] = (ctx.state.v[op.x] + op.nn) & 0xFF

# --- LD / OR / AND / XOR ---
def execute_ld_vx_vy(ctx: ExecutionContext, op: Operation) -> None:
    ctx.state.v[op.x] = ctx.state.v[op.y]

def execute_or(ctx: ExecutionContext, op: Operation) -> None:
    ctx.state.v[op.x] |= ctx.state.v[op.y]

def execute_and(ctx: ExecutionContext, op: Operation) -> None:
    ctx.state.v[op.x] &= ctx.state.v[op.y]

def execute_xor(ctx: ExecutionContext, op: Operation) -> None:
    ctx.state.v[op.x] ^= ctx.state.v[op.y]

# --- ADD Vx, Vy ---
# @intent:responsibility 8xy4: 加算し、桁上がりを VF に設定します。
def execute_add_vx_vy(ctx: ExecutionContext, op: Operation) -> None:
    state = ctx.state
    vx, vy = state.v[op.x], state.v[op.y]
    res = vx + vy
    state.vf = 1 if res > 0xFF else 0
    state.v[op.x] = res & 0xFF

# --- SUB Vx, Vy ---
# @intent:responsibility 8xy5: Vx -= Vy。VF は Vx > Vy のとき1（借りなし）。
def execute_sub(ctx: ExecutionContext, op: Operation) -> None:
    state = ctx.state
    vx, vy = state.v[op.x], state.v[op.y]
    state.vf = 1 if vx > vy else 0
    state.v[op.x] = (vx - vy) & 0xFF

# --- SUBN Vx, Vy ---
# @intent:responsibility 8xy7: Vx = Vy - Vx。VF は Vy > Vx のとき1。
def execute_subn(ctx: ExecutionContext, op: Operation) -> None:
    state = ctx.state
    vx, vy = state.v[op.x], state.v[op.y]
    state.vf = 1 if vy > vx else 0
    state.v[op.x] = (vy - vx) & 0xFF

# --- SHR / SHL ---
# @intent:rationale 既定では Vx 自身をシフトします（CHIP-48系）。
#                  shift_uses_vy が有効な場合は Vy をシフトした結果を Vx に格納します（COSMAC VIP）。
def _shift_source(ctx: ExecutionContext, op: Operation) -> int:
    if ctx.quirks.shift_uses_vy:
        return ctx.state.v[op.y]
    return ctx.state.v[op.x]

def execute_shr(ctx: ExecutionContext, op: Operation) -> None:
    value = _shift_source(ctx, op)
    ctx.state.vf = value & 0x1
    ctx.state.v[op.x] = value >> 1

def execute_shl(ctx: ExecutionContext, op: Operation) -> None:
    value = _shift_source(ctx, op)
    ctx.state.vf = value >> 7
    ctx.state.v[op.x] = (value << 1) & 0xFF

# --- RND Vx, byte ---
# @intent:responsibility Cxnn: マシン固有の乱数源から1バイトを得て nn でマスクします。
def execute_rnd(ctx: ExecutionContext, op: Operation) -> None:
    ctx.state.v[op.x] = ctx.rng.randrange(256) & op.nn
