# chip8_tracer/debugger/debugger.py
"""
実行制御モジュール。

マシンの実行/停止状態を保持し、ユーザーが指定したアドレス（ブレークポイント）で
命令の実行前に中断させる責務を負います。
"""
import logging
from enum import Enum
from typing import FrozenSet, Optional, Set

logger = logging.getLogger(__name__)

# @intent:responsibility 実行制御の状態を定義します。
class ExecutionState(Enum):
    RUNNING = "RUNNING"
    HALTED = "HALTED"

# @intent:responsibility 実行/停止フラグとブレークポイント集合を管理します。
class ExecutionControl:
    """
    マシンの実行制御を行うクラス。
    初期状態は HALTED で、ROMのロード成功時に RUNNING へ遷移します。
    """
    def __init__(self):
        self._running: bool = False
        self._breakpoints: Set[int] = set()
        # ブレークポイントで停止した後の再開時に、そのアドレスを1回だけ通過させる
        self._skip_breakpoint_at: Optional[int] = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def state(self) -> ExecutionState:
        return ExecutionState.RUNNING if self._running else ExecutionState.HALTED

    # --- Breakpoints ---
    def set_breakpoint(self, address: int) -> None:
        self._breakpoints.add(address & 0xFFFF)
        logger.debug("Breakpoint set at 0x%04X", address & 0xFFFF)

    def clear_breakpoint(self, address: int) -> None:
        self._breakpoints.discard(address & 0xFFFF)
        logger.debug("Breakpoint cleared at 0x%04X", address & 0xFFFF)

    def clear_breakpoints(self) -> None:
        self._breakpoints.clear()

    def breakpoints(self) -> FrozenSet[int]:
        """
        現在設定されている全てのブレークポイントのコピーを返します。
        """
        return frozenset(self._breakpoints)

    # @intent:responsibility 指定アドレスの命令を実行する前に停止すべきかを判定し、必要なら停止状態へ遷移します。
    def should_break(self, pc: int) -> bool:
        if self._skip_breakpoint_at is not None:
            skip = self._skip_breakpoint_at
            self._skip_breakpoint_at = None
            if skip == pc:
                return False
        if pc in self._breakpoints:
            self._running = False
            logger.debug("Breakpoint hit at PC: 0x%04X", pc)
            return True
        return False

    # --- State transitions ---
    # @intent:responsibility 実行を再開します。
    # @intent:rationale 現在のPCにブレークポイントがある場合、それを一度だけ通過させます。
    #                  そうしないと再開直後に同じ場所で再び停止してしまいます。
    #                  通過指定は直前の再開分を引き継ぎません。
    def resume(self, current_pc: Optional[int] = None) -> None:
        if current_pc is not None and current_pc in self._breakpoints:
            self._skip_breakpoint_at = current_pc
        else:
            self._skip_breakpoint_at = None
        self._running = True

    def pause(self) -> None:
        self._running = False
        self._skip_breakpoint_at = None

    def halt(self) -> None:
        self._running = False
        self._skip_breakpoint_at = None

    # @intent:responsibility スナップショットから状態を復元します。
    def restore(self, running: bool, breakpoints: FrozenSet[int]) -> None:
        self._breakpoints = set(breakpoints)
        self._running = running
        self._skip_breakpoint_at = None
