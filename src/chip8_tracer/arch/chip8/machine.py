# src/chip8_tracer/arch/chip8/machine.py
"""
CHIP-8 仮想マシン本体。

メモリ、CPU、フレームバッファ、タイマー、キーパッド、実行制御、乱数源を1つに束ね、
ホストが呼び出す公開操作（reset, load_rom, cycle, tick など）を提供します。

このクラスは内部で排他制御を行いません。複数スレッドから操作する場合は
MachineSession を介して全ての呼び出しを直列化してください。
"""
import logging
import random
import time
from typing import FrozenSet, Iterable, List, Optional

from chip8_tracer.common.errors import Diagnostic, RomTooLargeError
from chip8_tracer.config.models import QuirkConfig
from chip8_tracer.core.snapshot import DebugSnapshot, Operation
from chip8_tracer.transport.memory import Memory
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.display import Framebuffer
from chip8_tracer.arch.chip8.keypad import Keypad
from chip8_tracer.arch.chip8.timers import Timers
from chip8_tracer.arch.chip8.font import FONT_BASE, FONT_SET
from chip8_tracer.arch.chip8.state import Chip8CpuState, PROGRAM_START
from chip8_tracer.arch.chip8.disassembler import disassembly_window
from chip8_tracer.arch.chip8.savestate import MachineImage, decode_image, encode_image
from chip8_tracer.debugger.debugger import ExecutionControl

logger = logging.getLogger(__name__)


# @intent:responsibility CHIP-8マシン全体の状態を保持し、ホスト向けの公開操作を提供します。
class Chip8Machine:
    """
    CHIP-8仮想マシン。

    seed を指定した場合、reset の度に同じシードで乱数源を初期化するため、
    Cxnn の結果が決定的になります（テスト用）。省略時は現在時刻で初期化します。
    """
    def __init__(self, quirks: QuirkConfig = QuirkConfig(), seed: Optional[int] = None):
        self._seed = seed
        self._rng = random.Random()
        self._memory = Memory()
        self._framebuffer = Framebuffer()
        self._keypad = Keypad()
        self._timers = Timers()
        self._control = ExecutionControl()
        self._cpu = Chip8Cpu(
            self._memory, self._framebuffer, self._keypad, self._timers, self._rng, quirks
        )
        self.reset()

    # --- Accessors ---
    @property
    def memory(self) -> Memory:
        return self._memory

    @property
    def framebuffer(self) -> Framebuffer:
        return self._framebuffer

    @property
    def keypad(self) -> Keypad:
        return self._keypad

    @property
    def timers(self) -> Timers:
        return self._timers

    @property
    def cpu(self) -> Chip8Cpu:
        return self._cpu

    @property
    def state(self) -> Chip8CpuState:
        return self._cpu.get_state()

    @property
    def quirks(self) -> QuirkConfig:
        return self._cpu.quirks

    @property
    def running(self) -> bool:
        return self._control.running

    @property
    def rom_capacity(self) -> int:
        return self._memory.get_size() - PROGRAM_START

    @property
    def sound_active(self) -> bool:
        return self._timers.sound_active

    # --- Lifecycle ---
    # @intent:responsibility メモリ、レジスタ、スタック、画面、キー、タイマーをクリアし、フォントを再配置します。
    # @intent:post-condition 停止状態(HALTED)になります。ブレークポイントは保持されます。
    def reset(self) -> None:
        self._memory.clear()
        self._memory.load(FONT_BASE, FONT_SET)
        self._cpu.reset()
        self._cpu.get_and_clear_diagnostics()
        self._cpu.consume_halt_request()
        self._framebuffer.reset()
        self._keypad.reset()
        self._timers.reset()
        self._control.halt()
        self._rng.seed(self._seed if self._seed is not None else time.time_ns())

    # @intent:responsibility ROMを0x200から配置し、実行状態へ遷移させます。
    # @intent:pre-condition ROMはプログラム領域（3584バイト）に収まる必要があります。収まらない場合は一切変更しません。
    def load_rom(self, data: Iterable[int]) -> None:
        rom = bytes(data)
        capacity = self.rom_capacity
        if len(rom) > capacity:
            raise RomTooLargeError(len(rom), capacity)
        self._memory.load(PROGRAM_START, rom)
        self._control.resume()
        logger.debug("Loaded ROM of %d bytes at 0x%04X", len(rom), PROGRAM_START)

    # --- Execution ---
    # @intent:responsibility 1命令を実行します。停止中、またはPCにブレークポイントがある場合は何もしません。
    # @intent:post-condition どのような命令語に対しても例外を送出しません。
    def cycle(self) -> Optional[Operation]:
        if not self._control.running:
            return None
        if self._control.should_break(self._cpu.get_state().pc):
            return None
        operation = self._cpu.step()
        if self._cpu.consume_halt_request():
            self._control.halt()
        return operation

    # @intent:responsibility 60Hzのタイマー更新を行います。停止中は何もしません。
    def tick(self) -> None:
        if not self._control.running:
            return
        self._timers.tick()

    # --- Input ---
    def key_down(self, key: int) -> None:
        self._keypad.key_down(key)

    def key_up(self, key: int) -> None:
        self._keypad.key_up(key)

    # --- Execution control ---
    def set_breakpoint(self, address: int) -> None:
        self._control.set_breakpoint(address)

    def clear_breakpoint(self, address: int) -> None:
        self._control.clear_breakpoint(address)

    def clear_breakpoints(self) -> None:
        self._control.clear_breakpoints()

    def breakpoints(self) -> FrozenSet[int]:
        return self._control.breakpoints()

    def pause(self) -> None:
        self._control.pause()

    def resume(self) -> None:
        self._control.resume(current_pc=self._cpu.get_state().pc)

    def toggle_pause(self) -> bool:
        """実行/停止を切り替え、切り替え後に停止中であれば True を返します。"""
        if self._control.running:
            self.pause()
        else:
            self.resume()
        return not self._control.running

    def hard_stop(self) -> None:
        self._control.halt()

    # --- Host views ---
    # @intent:responsibility 画面に変化があった場合のみ画素のコピーを返し、変化フラグをクリアします。
    def take_changed_framebuffer(self) -> Optional[bytes]:
        return self._framebuffer.take_changed()

    # @intent:responsibility デバッグ表示用の不変スナップショットを生成します。
    def debug_snapshot(self) -> DebugSnapshot:
        state = self._cpu.get_state()
        return DebugSnapshot(
            pc=state.pc,
            index=state.index,
            sp=state.sp,
            delay_timer=self._timers.delay,
            sound_timer=self._timers.sound,
            registers=tuple(state.v),
            stack=tuple(state.stack),
            disassembly=tuple(disassembly_window(self._memory, state.pc)),
            breakpoints=self._control.breakpoints(),
            running=self._control.running,
        )

    # @intent:responsibility メモリの一部をコピーして返します。範囲外は切り詰め、不正な範囲では空を返します。
    def memory_dump(self, offset: int, limit: int) -> bytes:
        size = self._memory.get_size()
        if offset < 0 or limit <= 0 or offset >= size:
            return b""
        limit = min(limit, size - offset)
        return self._memory.dump(offset, limit)

    def get_and_clear_diagnostics(self) -> List[Diagnostic]:
        return self._cpu.get_and_clear_diagnostics()

    # --- Save state ---
    # @intent:responsibility マシン全体の状態を MachineImage として取り出します（全てコピー）。
    def capture_image(self) -> MachineImage:
        state = self._cpu.get_state()
        return MachineImage(
            memory=self._memory.raw(),
            registers=tuple(state.v),
            index=state.index,
            pc=state.pc,
            stack=tuple(state.stack),
            sp=state.sp,
            delay_timer=self._timers.delay,
            sound_timer=self._timers.sound,
            framebuffer=self._framebuffer.snapshot(),
            changed=self._framebuffer.changed,
            keys=tuple(self._keypad.states()),
            running=self._control.running,
            quirks=self._cpu.quirks,
            wait_latch=self._keypad.wait_latch,
            breakpoints=self._control.breakpoints(),
        )

    def serialize(self) -> bytes:
        return encode_image(self.capture_image())

    # @intent:responsibility 検証済みの MachineImage から新しいマシンを構築します。
    @classmethod
    def from_image(cls, image: MachineImage, seed: Optional[int] = None) -> "Chip8Machine":
        machine = cls(quirks=image.quirks, seed=seed)
        machine._memory.load(0, image.memory)
        machine._cpu.restore_state(Chip8CpuState(
            pc=image.pc,
            sp=image.sp,
            v=list(image.registers),
            index=image.index,
            stack=list(image.stack),
        ))
        machine._timers.delay = image.delay_timer
        machine._timers.sound = image.sound_timer
        machine._framebuffer.restore(image.framebuffer, image.changed)
        machine._keypad.restore(list(image.keys), image.wait_latch)
        machine._control.restore(image.running, image.breakpoints)
        return machine

    # @intent:responsibility バイト列から新しいマシンを構築します。
    # @intent:rationale 既存インスタンスを書き換えるのではなく新しいインスタンスを返すため、
    #                  検証に失敗しても呼び出し側のマシンは変更されません。
    @classmethod
    def deserialize(cls, data: bytes, seed: Optional[int] = None) -> "Chip8Machine":
        return cls.from_image(decode_image(data), seed=seed)
