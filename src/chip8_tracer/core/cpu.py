# chip8_tracer/core/cpu.py
"""
Core Layer (抽象CPU)

このモジュールは、CPUの基本的な状態管理と命令サイクルの駆動に関する抽象化を提供します。
具体的な命令の振る舞いはInstruction Layerに移譲されます。
"""
from abc import ABC, abstractmethod

from chip8_tracer.transport.memory import Memory
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.core.state import CpuState

# @intent:responsibility 抽象CPUの基本機能とインターフェースを定義します。
class AbstractCpu(ABC):
    """
    全てのCPUエミュレーションの基底となる抽象クラス。
    メモリとのインターフェース、基本的な状態管理、命令サイクルの抽象化を提供します。
    """
    # @intent:responsibility CPUの状態とメモリへの参照を初期化します。
    def __init__(self, memory: Memory):
        self._memory = memory
        self._state: CpuState = self._create_initial_state()
        self._cycle_count: int = 0
        # @intent:rationale Stateオブジェクトの直接操作を避けるため、protectedな命名規則を採用。
        #                  外部からのアクセスは`get_state()`メソッドを介して行う。

    # @intent:responsibility 初期状態のCpuStateオブジェクトを生成します。
    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        """
        CPUの初期状態を生成して返します。
        """
        pass

    # @intent:responsibility CPUをリセットし、初期状態に戻します。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0

    # @intent:responsibility 現在のCPUの状態を返します。
    def get_state(self) -> CpuState:
        return self._state

    # @intent:responsibility 外部から与えられた状態でCPUの状態を置き換えます。
    def restore_state(self, state: CpuState) -> None:
        self._state = state

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    # @intent:responsibility メモリから次の命令（オペコード）をフェッチします。
    @abstractmethod
    def _fetch(self) -> int:
        """
        現在のPCからメモリの次の命令（オペコード）をフェッチし、その値を返します。
        """
        pass

    # @intent:responsibility フェッチしたオペコードを解析し、Operationオブジェクトに変換します。
    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        pass

    # @intent:responsibility デコードされた命令を実行し、CPUの状態を更新します。
    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        pass

    # @intent:responsibility CPUを1命令サイクル進め、実行した命令を返します。
    # @intent:rationale Template Methodパターンを採用し、共通の実行フロー（フェッチ→デコード→PC更新→実行）を定義します。
    def step(self) -> Operation:
        """
        CPUを1命令サイクル進めます。PCは実行前に命令長分進められるため、
        分岐命令は進めた後のPCを基準に書き換えます。
        """
        opcode = self._fetch()
        operation = self._decode(opcode)
        self._update_pc(operation)
        self._execute(operation)
        self._cycle_count += 1
        return operation

    # @intent:responsibility 命令実行前にPCを更新します。
    def _update_pc(self, operation: Operation) -> None:
        self._state.pc = (self._state.pc + operation.length) & 0xFFFF
