# src/chip8_tracer/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。
"""
from chip8_tracer.common.errors import DiagnosticKind
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.arch.chip8.state import STACK_DEPTH
from .base import ExecutionContext, skip_next, repeat_current

# --- RET ---
# @intent:responsibility RET 命令を実行し、スタックから戻り先アドレスを取り出します。
# @intent:pre-condition sp > 0。空のスタックからの復帰は命令を巻き戻してマシンを停止させます。
def execute_ret(ctx: ExecutionContext, op: Operation) -> None:
    state = ctx.state
    if state.sp == 0:
        repeat_current(state)
        ctx.report(DiagnosticKind.STACK_UNDERFLOW, "RET with empty stack", True)
        return
    state.sp -= 1
    state.pc = state.stack[state.sp]

# --- JP addr ---
def execute_jp(ctx: ExecutionContext, op: Operation) -> None:
    ctx.state.pc = op.nnn

# --- CALL addr ---
# @intent:responsibility CALL 命令を実行し、戻り先（次の命令）をスタックに積んでジャンプします。
# @intent:pre-condition sp < 16。満杯のスタックへの呼び出しは命令を巻き戻してマシンを停止させます。
def execute_call(ctx: ExecutionContext, op: Operation) -> None:
    state = ctx.state
    if state.sp >= STACK_DEPTH:
        repeat_current(state)
        ctx.report(DiagnosticKind.STACK_OVERFLOW, f"CALL with full stack ({STACK_DEPTH} entries)", True)
        return
    state.stack[state.sp] = state.pc
    state.sp += 1
    state.pc = op.nnn

# --- JP V0, addr ---
def execute_jp_v0(ctx: ExecutionContext, op: Operation) -> None:
    ctx.state.pc = (op.nnn + ctx.state.v[0]) & 0xFFFF

# --- SE / SNE ---
def execute_se_vx_nn(ctx: ExecutionContext, op: Operation) -> None:
    if ctx.state.v[op.x] == op.nn:
        skip_next(ctx.state)

def execute_sne_vx_nn(ctx: ExecutionContext, op: Operation) -> None:
    if ctx.state.v[op.x] != op.nn:
        skip_next(ctx.state)

def execute_se_vx_vy(ctx: ExecutionContext, op: Operation) -> None:
    if ctx.state.v[op.x] == ctx.state.v[op.y]:
        skip_next(ctx.state)

def execute_sne_vx_vy(ctx: ExecutionContext, op: Operation) -> None:
    if ctx.state.v[op.x] != ctx.state.v[op.y]:
        skip_next(ctx.state)

# --- SKP / SKNP ---
# @intent:rationale キー番号は Vx の下位4bitを使用します。
def execute_skp(ctx: ExecutionContext, op: Operation) -> None:
    if ctx.keypad.is_pressed(ctx.state.v[op.x]):
        skip_next(ctx.state)

def execute_sknp(ctx: ExecutionContext, op: Operation) -> None:
    if not ctx.keypad.is_pressed(ctx.state.v[op.x]):
        skip_next(ctx.state)
