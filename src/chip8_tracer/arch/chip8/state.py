# src/chip8_tracer/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。
"""
from dataclasses import dataclass, field
from typing import List

from chip8_tracer.core.state import CpuState

# @intent:constant CHIP-8のメモリマップとレジスタ構成を定義します。
PROGRAM_START = 0x200
REGISTER_COUNT = 16
STACK_DEPTH = 16
FLAG_REGISTER = 0xF

# @intent:responsibility CHIP-8 CPUの全てのレジスタ（V0-VF, I, PC, SP）とコールスタックの状態を保持します。
# @intent:rationale spはスタック上の使用中エントリ数（0〜16）であり、stack[sp]が次の書き込み先です。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUのレジスタ状態を保持するデータクラス。
    """
    pc: int = PROGRAM_START
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)  # V0-VF
    index: int = 0x0000  # I
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)

    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF
