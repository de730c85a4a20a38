# src/chip8_tracer/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通定義とユーティリティ。
"""
import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, NamedTuple

from chip8_tracer.common.errors import DiagnosticKind
from chip8_tracer.config.models import QuirkConfig
from chip8_tracer.transport.memory import Memory
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.arch.chip8.display import Framebuffer
from chip8_tracer.arch.chip8.keypad import Keypad
from chip8_tracer.arch.chip8.timers import Timers


# @intent:responsibility デコード結果となる命令種別を列挙します。
# @intent:rationale デコード時に種別を確定させることで、実行側は種別による単一の表引きだけで済み、
#                  未知の命令は UNKNOWN という一つの既定ケースに集約されます。
class InstructionKind(Enum):
    CLS = auto()        # 00E0
    RET = auto()        # 00EE
    SYS = auto()        # 0nnn
    JP = auto()         # 1nnn
    CALL = auto()       # 2nnn
    SE_VX_NN = auto()   # 3xnn
    SNE_VX_NN = auto()  # 4xnn
    SE_VX_VY = auto()   # 5xy0
    LD_VX_NN = auto()   # 6xnn
    ADD_VX_NN = auto()  # 7xnn
    LD_VX_VY = auto()   # 8xy0
    OR = auto()         # 8xy1
    AND = auto()        # 8xy2
    XOR = auto()        # 8xy3
    ADD_VX_VY = auto()  # 8xy4
    SUB = auto()        # 8xy5
    SHR = auto()        # 8xy6
    SUBN = auto()       # 8xy7
    SHL = auto()        # 8xyE
    SNE_VX_VY = auto()  # 9xy0
    LD_I = auto()       # Annn
    JP_V0 = auto()      # Bnnn
    RND = auto()        # Cxnn
    DRW = auto()        # Dxyn
    SKP = auto()        # Ex9E
    SKNP = auto()       # ExA1
    LD_VX_DT = auto()   # Fx07
    LD_VX_K = auto()    # Fx0A
    LD_DT_VX = auto()   # Fx15
    LD_ST_VX = auto()   # Fx18
    ADD_I_VX = auto()   # Fx1E
    LD_F_VX = auto()    # Fx29
    LD_B_VX = auto()    # Fx33
    LD_MEM_VX = auto()  # Fx55
    LD_VX_MEM = auto()  # Fx65
    UNKNOWN = auto()


# @intent:data_structure 16bit命令語から切り出した各フィールド。
class OpcodeFields(NamedTuple):
    opcode: int
    x: int
    y: int
    n: int
    nn: int
    nnn: int


# @intent:utility_function 命令語を x, y, n, nn, nnn の各フィールドに分解します。
def split_fields(opcode: int) -> OpcodeFields:
    opcode &= 0xFFFF
    return OpcodeFields(
        opcode=opcode,
        x=(opcode >> 8) & 0xF,
        y=(opcode >> 4) & 0xF,
        n=opcode & 0xF,
        nn=opcode & 0xFF,
        nnn=opcode & 0xFFF,
    )


# @intent:responsibility 命令の実行に必要なマシン構成要素をまとめて実行関数に渡します。
@dataclass
class ExecutionContext:
    state: Chip8CpuState
    memory: Memory
    framebuffer: Framebuffer
    keypad: Keypad
    timers: Timers
    rng: random.Random
    quirks: QuirkConfig
    # report(kind, message, halt): 診断イベントを記録し、halt=True の場合はマシンの停止を要求する
    report: Callable[[DiagnosticKind, str, bool], None]


# @intent:utility_function 次の命令をスキップします（PCを2進める）。
def skip_next(state: Chip8CpuState) -> None:
    state.pc = (state.pc + 2) & 0xFFFF


# @intent:utility_function 現在の命令を再実行させます（PCを2戻す）。
def repeat_current(state: Chip8CpuState) -> None:
    state.pc = (state.pc - 2) & 0xFFFF
