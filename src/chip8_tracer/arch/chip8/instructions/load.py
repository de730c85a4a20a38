# src/chip8_tracer/arch/chip8/instructions/load.py
"""
転送命令（レジスタ、Iレジスタ、タイマー、メモリ、キー入力）の実装。
"""
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.arch.chip8.font import FONT_BASE, GLYPH_HEIGHT
from .base import ExecutionContext, repeat_current

# --- LD Vx, byte ---
def execute_ld_vx_nn(ctx: ExecutionContext, op: Operation) -> None:
    ctx.state.v[op.x] = op.nn

# --- LD I, addr ---
def execute_ld_i(ctx: ExecutionContext, op: Operation) -> None:
    ctx.state.index = op.nnn

# --- ADD I, Vx ---
# @intent:responsibility Fx1E: I += Vx（16bitで折り返し）。
def execute_add_i_vx(ctx: ExecutionContext, op: Operation) -> None:
    ctx.state.index = (ctx.state.index + ctx.state.v[op.x]) & 0xFFFF

# --- Timers ---
def execute_ld_vx_dt(ctx: ExecutionContext, op: Operation) -> None:
    ctx.state.v[op.x] = ctx.timers.delay

def execute_ld_dt_vx(ctx: ExecutionContext, op: Operation) -> None:
    ctx.timers.delay = ctx.state.v[op.x]

def execute_ld_st_vx(ctx: ExecutionContext, op: Operation) -> None:
    ctx.timers.sound = ctx.state.v[op.x]

# --- LD Vx, K ---
# @intent:responsibility Fx0A: キー入力を待ちます。
# @intent:rationale スレッドをブロックせず、PCを巻き戻して次のサイクルで同じ命令を再実行させます。
def execute_ld_vx_k(ctx: ExecutionContext, op: Operation) -> None:
    key = ctx.keypad.poll_key_wait(ctx.quirks.key_wait_on_release)
    if key is None:
        repeat_current(ctx.state)
        return
    ctx.state.v[op.x] = key

# --- LD F, Vx ---
# @intent:responsibility Fx29: Vx の16進数字に対応するフォント字形のアドレスを I に設定します。
def execute_ld_f_vx(ctx: ExecutionContext, op: Operation) -> None:
    ctx.state.index = (ctx.state.v[op.x] * GLYPH_HEIGHT + FONT_BASE) & 0xFFFF

# --- LD B, Vx ---
# @intent:responsibility Fx33: Vx の10進表現（百の位、十の位、一の位）を I, I+1, I+2 に格納します。
def execute_ld_b_vx(ctx: ExecutionContext, op: Operation) -> None:
    value = ctx.state.v[op.x]
    index = ctx.state.index
    ctx.memory.write(index, value // 100)
    ctx.memory.write(index + 1, (value // 10) % 10)
    ctx.memory.write(index + 2, value % 10)

# --- LD [I], Vx ---
# @intent:responsibility Fx55: V0..Vx を I から始まるメモリに格納します。
# @intent:rationale 初期のインタプリタは転送後に I を x+1 進めており、多くのROMがこれに依存します。
def execute_ld_mem_vx(ctx: ExecutionContext, op: Operation) -> None:
    state = ctx.state
    for i in range(op.x + 1):
        ctx.memory.write(state.index + i, state.v[i])
    if ctx.quirks.load_store_increments_index:
        state.index = (state.index + op.x + 1) & 0xFFFF

# --- LD Vx, [I] ---
def execute_ld_vx_mem(ctx: ExecutionContext, op: Operation) -> None:
    state = ctx.state
    for i in range(op.x + 1):
        state.v[i] = ctx.memory.read(state.index + i)
    if ctx.quirks.load_store_increments_index:
        state.index = (state.index + op.x + 1) & 0xFFFF
