# src/chip8_tracer/arch/chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。
"""
from functools import lru_cache

from chip8_tracer.common.errors import DiagnosticKind
from chip8_tracer.core.snapshot import Operation
from .base import ExecutionContext, InstructionKind, split_fields
from .maps import DECODE_MAP, EXECUTE_MAP, MNEMONIC_MAP

# @intent:responsibility CHIP-8のオペコードをデコードします。
# @intent:rationale Operationは不変であり、同じ命令語は常に同じ結果になるためキャッシュします。
@lru_cache(maxsize=None)
def decode_opcode(opcode: int) -> Operation:
    """
    16bit命令語をデコードし、Operationオブジェクトを返します。
    どのパターンにも一致しない場合は InstructionKind.UNKNOWN になります。
    """
    fields = split_fields(opcode)
    kind = InstructionKind.UNKNOWN
    for mask, match, candidate in DECODE_MAP:
        if fields.opcode & mask == match:
            kind = candidate
            break
    mnemonic, format_operands = MNEMONIC_MAP[kind]
    return Operation(
        opcode=fields.opcode,
        kind=kind,
        mnemonic=mnemonic,
        operands=format_operands(fields),
        x=fields.x,
        y=fields.y,
        n=fields.n,
        nn=fields.nn,
        nnn=fields.nnn,
    )

# @intent:responsibility デコードされたCHIP-8命令を実行します。
def execute_instruction(operation: Operation, ctx: ExecutionContext) -> None:
    """
    デコードされた命令を実行し、マシンの状態を変更します。
    実行関数が登録されていない命令は、PCを進めた以外の副作用を持たず、診断イベントを報告します。
    """
    executor = EXECUTE_MAP.get(operation.kind)
    if executor is None:
        ctx.report(DiagnosticKind.UNKNOWN_OPCODE, f"Unknown opcode: 0x{operation.opcode:04X}", False)
        return
    executor(ctx, operation)

__all__ = ["decode_opcode", "execute_instruction", "ExecutionContext", "InstructionKind"]
