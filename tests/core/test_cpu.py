# tests/core/test_cpu.py
"""
chip8_tracer.core.cpuモジュールの単体テスト。
"""
import pytest

from chip8_tracer.core.state import CpuState
from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.memory import Memory
from chip8_tracer.arch.chip8.instructions import InstructionKind

# @intent:test_suite CPUの状態管理と抽象CPUの基本的な動作を検証します。

class FakeCpu(AbstractCpu):
    """
    1バイト命令を実行するだけのテスト用CPU。
    """
    def __init__(self, memory: Memory, initial_pc: int = 0x0000, initial_sp: int = 0x0000):
        self._initial_pc = initial_pc
        self._initial_sp = initial_sp
        super().__init__(memory)

    def _create_initial_state(self) -> CpuState:
        return CpuState(pc=self._initial_pc, sp=self._initial_sp)

    def _fetch(self) -> int:
        return self._memory.read(self._state.pc)

    def _decode(self, opcode: int) -> Operation:
        return Operation(opcode=opcode, kind=InstructionKind.UNKNOWN, mnemonic="NOP", length=1)

    def _execute(self, operation: Operation) -> None:
        self._memory.write(0x0020, 0xFF)


class TestCpuState:
    """
    CpuStateの単体テスト。
    """
    def test_cpu_state_init_default(self):
        state = CpuState()
        assert state.pc == 0x0000
        assert state.sp == 0x0000

    def test_cpu_state_mutability(self):
        state = CpuState(pc=0x1234, sp=3)
        state.pc = 0x1000
        state.sp = 4
        assert state.pc == 0x1000
        assert state.sp == 4

class TestAbstractCpu:
    """
    AbstractCpuの具象メソッドのテスト。
    """
    @pytest.fixture
    def setup_cpu(self):
        memory = Memory(256)
        cpu = FakeCpu(memory, initial_pc=0x0010, initial_sp=0x0003)
        return cpu, memory

    def test_abstract_cpu_init(self, setup_cpu):
        cpu, _ = setup_cpu
        state = cpu.get_state()
        assert state.pc == 0x0010
        assert state.sp == 0x0003
        assert cpu.cycle_count == 0

    # @intent:test_case_step step がフェッチ→デコード→PC更新→実行の順に処理することを検証します。
    def test_step(self, setup_cpu):
        cpu, memory = setup_cpu
        operation = cpu.step()
        assert operation.mnemonic == "NOP"
        assert cpu.get_state().pc == 0x0011
        assert memory.read(0x0020) == 0xFF
        assert cpu.cycle_count == 1

    # @intent:test_case_step PCの更新が16bitで折り返すことを検証します。
    def test_step_wraps_pc(self, setup_cpu):
        cpu, _ = setup_cpu
        cpu.get_state().pc = 0xFFFF
        cpu.step()
        assert cpu.get_state().pc == 0x0000

    # @intent:test_case_reset reset で初期状態とサイクル数が戻ることを検証します。
    def test_abstract_cpu_reset(self, setup_cpu):
        cpu, _ = setup_cpu
        cpu.step()
        cpu.get_state().sp = 9
        cpu.reset()
        assert cpu.get_state().pc == 0x0010
        assert cpu.get_state().sp == 0x0003
        assert cpu.cycle_count == 0

    def test_restore_state(self, setup_cpu):
        cpu, _ = setup_cpu
        cpu.restore_state(CpuState(pc=0x0040, sp=1))
        assert cpu.get_state() == CpuState(pc=0x0040, sp=1)
        cpu.step()
        assert cpu.get_state().pc == 0x0041

    def test_abstract_methods_are_enforced(self):
        with pytest.raises(TypeError):
            AbstractCpu(Memory())
