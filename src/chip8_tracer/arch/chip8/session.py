# src/chip8_tracer/arch/chip8/session.py
"""
ホスト向けのスレッドセーフなマシン操作窓口。

サイクル駆動スレッドとUIスレッドが同じマシンを操作する場合、全ての呼び出しを
単一のロックで直列化します。状態のロードは検証を終えた新しいマシンとの差し替えで行うため、
中途半端にロードされた状態が観測されることはありません。
"""
import logging
import os
import threading
from typing import List, Optional

from chip8_tracer.common.errors import Chip8Error, Diagnostic, RomTooLargeError
from chip8_tracer.config.models import QuirkConfig
from chip8_tracer.core.snapshot import DebugSnapshot, Operation
from chip8_tracer.loader.loader import RomLoader
from chip8_tracer.arch.chip8.machine import Chip8Machine

logger = logging.getLogger(__name__)


# @intent:responsibility 1つの Chip8Machine をロックの下に保持し、全ての公開操作を直列化します。
class MachineSession:
    def __init__(self, machine: Optional[Chip8Machine] = None):
        self._lock = threading.RLock()
        self._machine = machine if machine is not None else Chip8Machine()
        self._rom: Optional[bytes] = None

    # @intent:rationale 返されるインスタンスはロードで差し替えられる可能性があります。
    #                  直接操作する場合はホスト側で直列化を保証してください。
    @property
    def machine(self) -> Chip8Machine:
        with self._lock:
            return self._machine

    # --- Lifecycle ---
    def reset(self) -> None:
        with self._lock:
            self._machine.reset()

    # @intent:responsibility リセットしてからROMをロードし、実行を開始します。
    def load_rom(self, data: bytes) -> None:
        rom = bytes(data)
        with self._lock:
            capacity = self._machine.rom_capacity
            if len(rom) > capacity:
                raise RomTooLargeError(len(rom), capacity)
            self._machine.reset()
            self._machine.load_rom(rom)
            self._rom = rom
        logger.info("ROM loaded (%d bytes)", len(rom))

    # @intent:responsibility ファイルからROMを読み込んでロードし、ROM名（ファイル名）を返します。
    def load_rom_file(self, path: str) -> str:
        logger.info("Attempting to load ROM from path: %s", path)
        data = RomLoader().load_from_path(path)
        self.load_rom(data)
        return os.path.basename(path)

    # @intent:responsibility 直前にロードしたROMを再ロードします。
    def soft_reset(self) -> None:
        with self._lock:
            if self._rom is None:
                raise Chip8Error("no ROM loaded to soft reset")
            self._machine.reset()
            self._machine.load_rom(self._rom)
        logger.info("Soft reset complete.")

    # @intent:responsibility マシンを停止状態でリセットし、保持しているROMも破棄します。
    def hard_reset(self) -> None:
        with self._lock:
            self._machine.reset()
            self._rom = None
        logger.info("Hard reset: ROM cleared.")

    # --- Execution ---
    def cycle(self) -> Optional[Operation]:
        with self._lock:
            return self._machine.cycle()

    def run_cycles(self, count: int) -> int:
        """最大 count 回 cycle を実行し、実際に命令を実行した回数を返します。"""
        executed = 0
        with self._lock:
            for _ in range(count):
                if self._machine.cycle() is None:
                    break
                executed += 1
        return executed

    def tick(self) -> None:
        with self._lock:
            self._machine.tick()

    def toggle_pause(self) -> bool:
        with self._lock:
            paused = self._machine.toggle_pause()
        logger.info("Emulation %s.", "paused" if paused else "resumed")
        return paused

    # --- Input / breakpoints ---
    def key_down(self, key: int) -> None:
        with self._lock:
            self._machine.key_down(key)

    def key_up(self, key: int) -> None:
        with self._lock:
            self._machine.key_up(key)

    def set_breakpoint(self, address: int) -> None:
        with self._lock:
            self._machine.set_breakpoint(address)

    def clear_breakpoint(self, address: int) -> None:
        with self._lock:
            self._machine.clear_breakpoint(address)

    # --- Views ---
    def take_changed_framebuffer(self) -> Optional[bytes]:
        with self._lock:
            return self._machine.take_changed_framebuffer()

    def debug_snapshot(self) -> DebugSnapshot:
        with self._lock:
            return self._machine.debug_snapshot()

    def memory_dump(self, offset: int, limit: int) -> bytes:
        with self._lock:
            return self._machine.memory_dump(offset, limit)

    def get_and_clear_diagnostics(self) -> List[Diagnostic]:
        with self._lock:
            return self._machine.get_and_clear_diagnostics()

    # --- Save state ---
    def save_state(self) -> bytes:
        with self._lock:
            return self._machine.serialize()

    # @intent:responsibility 状態をロードし、マシンを丸ごと差し替えます。
    # @intent:post-condition 検証に失敗した場合は InvalidSnapshotError を送出し、現在のマシンはそのまま残ります。
    def load_state(self, data: bytes, seed: Optional[int] = None) -> None:
        machine = Chip8Machine.deserialize(data, seed=seed)
        with self._lock:
            self._machine = machine
        logger.info("State loaded.")

    # @intent:responsibility 現在の状態をファイルへ保存します。保存前に実行を一時停止します。
    def save_state_file(self, path: str) -> None:
        with self._lock:
            self._machine.pause()
            data = self._machine.serialize()
        with open(path, 'wb') as f:
            f.write(data)
        logger.info("State saved to: %s", path)

    # @intent:responsibility ファイルから状態をロードします。ロード後のマシンは停止状態になります。
    def load_state_file(self, path: str, seed: Optional[int] = None) -> None:
        with open(path, 'rb') as f:
            data = f.read()
        machine = Chip8Machine.deserialize(data, seed=seed)
        machine.pause()
        with self._lock:
            self._machine = machine
        logger.info("State loaded from: %s", path)

    @property
    def quirks(self) -> QuirkConfig:
        with self._lock:
            return self._machine.quirks
