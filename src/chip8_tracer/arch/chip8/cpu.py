# src/chip8_tracer/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。
"""
import logging
import random
from collections import deque
from typing import Deque, List

from chip8_tracer.common.errors import Diagnostic, DiagnosticKind
from chip8_tracer.config.models import QuirkConfig
from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.memory import Memory
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.arch.chip8.display import Framebuffer
from chip8_tracer.arch.chip8.keypad import Keypad
from chip8_tracer.arch.chip8.timers import Timers
from chip8_tracer.arch.chip8.instructions import ExecutionContext, decode_opcode, execute_instruction

logger = logging.getLogger(__name__)

# 保持する診断イベントの上限。超えた分は古いものから破棄されます。
DIAGNOSTIC_LIMIT = 100

# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 CPUをエミュレートするクラス。
    フレームバッファ、キーパッド、タイマー、乱数源は外部（Chip8Machine）から注入されます。
    """
    def __init__(
        self,
        memory: Memory,
        framebuffer: Framebuffer,
        keypad: Keypad,
        timers: Timers,
        rng: random.Random,
        quirks: QuirkConfig = QuirkConfig(),
    ):
        super().__init__(memory)
        self._framebuffer = framebuffer
        self._keypad = keypad
        self._timers = timers
        self._rng = rng
        self.quirks = quirks
        self._diagnostics: Deque[Diagnostic] = deque(maxlen=DIAGNOSTIC_LIMIT)
        self._halt_requested = False
        self._instruction_pc = self._state.pc
        self._instruction_opcode = 0

    # @intent:responsibility CHIP-8の初期状態を生成します。PCはプログラム開始アドレス(0x200)です。
    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState()

    def get_state(self) -> Chip8CpuState:
        return self._state

    # @intent:responsibility PCの位置からビッグエンディアンの16bit命令語をフェッチします。
    def _fetch(self) -> int:
        self._instruction_pc = self._state.pc
        self._instruction_opcode = self._memory.read_word(self._state.pc)
        return self._instruction_opcode

    def _decode(self, opcode: int) -> Operation:
        return decode_opcode(opcode)

    def _execute(self, operation: Operation) -> None:
        ctx = ExecutionContext(
            state=self._state,
            memory=self._memory,
            framebuffer=self._framebuffer,
            keypad=self._keypad,
            timers=self._timers,
            rng=self._rng,
            quirks=self.quirks,
            report=self._report,
        )
        execute_instruction(operation, ctx)

    # @intent:responsibility 実行中に検出された異常を診断イベントとして記録します。
    def _report(self, kind: DiagnosticKind, message: str, halt: bool) -> None:
        diagnostic = Diagnostic(
            kind=kind, pc=self._instruction_pc, opcode=self._instruction_opcode, message=message
        )
        logger.warning("%s at 0x%04X (opcode 0x%04X): %s",
                       kind.value, diagnostic.pc, diagnostic.opcode, message)
        self._diagnostics.append(diagnostic)
        if halt:
            self._halt_requested = True

    # @intent:responsibility 記録された診断イベント（最新の DIAGNOSTIC_LIMIT 件）を取得し、クリアします。
    def get_and_clear_diagnostics(self) -> List[Diagnostic]:
        diagnostics = list(self._diagnostics)
        self._diagnostics.clear()
        return diagnostics

    # @intent:responsibility 直前のステップで停止要求が出されたかを返し、要求をクリアします。
    def consume_halt_request(self) -> bool:
        requested = self._halt_requested
        self._halt_requested = False
        return requested
