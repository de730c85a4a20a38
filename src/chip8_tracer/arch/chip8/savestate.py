# src/chip8_tracer/arch/chip8/savestate.py
"""
マシン状態のセーブ/ロード用バイナリ形式。

言語固有のオブジェクト直列化には依存せず、バージョン付きの固定順レコードとして
全フィールドをビッグエンディアンで書き出します。

Layout (version 1):
    magic "C8ST", version u8,
    memory[4096], registers[16], I u16, pc u16, stack[16] u16, sp u8,
    delay u8, sound u8, framebuffer[2048], changed u8, keys[16],
    running u8, quirk flags u8, key-wait latch u8 (0xFF = none),
    breakpoint count u16, breakpoints u16 * count
"""
import struct
from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

from chip8_tracer.common.errors import InvalidSnapshotError
from chip8_tracer.config.models import QuirkConfig
from chip8_tracer.transport.memory import MEMORY_SIZE
from chip8_tracer.arch.chip8.display import DISPLAY_HEIGHT, DISPLAY_WIDTH
from chip8_tracer.arch.chip8.keypad import KEY_COUNT
from chip8_tracer.arch.chip8.state import REGISTER_COUNT, STACK_DEPTH

MAGIC = b"C8ST"
VERSION = 1
NO_LATCH = 0xFF

_HEADER = struct.Struct(">4sB")
_BODY = struct.Struct(
    f">{MEMORY_SIZE}s{REGISTER_COUNT}sHH{STACK_DEPTH}HBBB"
    f"{DISPLAY_WIDTH * DISPLAY_HEIGHT}sB{KEY_COUNT}sBBBH"
)
_BREAKPOINT = struct.Struct(">H")

# quirk flags
_SHIFT_USES_VY = 0x01
_KEY_WAIT_ON_RELEASE = 0x02
_LOAD_STORE_INCREMENTS_INDEX = 0x04
_QUIRK_MASK = _SHIFT_USES_VY | _KEY_WAIT_ON_RELEASE | _LOAD_STORE_INCREMENTS_INDEX


# @intent:data_structure 直列化の対象となるマシン全体の状態。検証済みの値のみを保持します。
@dataclass(frozen=True)
class MachineImage:
    memory: bytes
    registers: Tuple[int, ...]
    index: int
    pc: int
    stack: Tuple[int, ...]
    sp: int
    delay_timer: int
    sound_timer: int
    framebuffer: bytes
    changed: bool
    keys: Tuple[bool, ...]
    running: bool
    quirks: QuirkConfig
    wait_latch: Optional[int]
    breakpoints: FrozenSet[int]


def _encode_quirks(quirks: QuirkConfig) -> int:
    flags = 0
    if quirks.shift_uses_vy:
        flags |= _SHIFT_USES_VY
    if quirks.key_wait_on_release:
        flags |= _KEY_WAIT_ON_RELEASE
    if quirks.load_store_increments_index:
        flags |= _LOAD_STORE_INCREMENTS_INDEX
    return flags


def _decode_quirks(flags: int) -> QuirkConfig:
    return QuirkConfig(
        shift_uses_vy=bool(flags & _SHIFT_USES_VY),
        key_wait_on_release=bool(flags & _KEY_WAIT_ON_RELEASE),
        load_store_increments_index=bool(flags & _LOAD_STORE_INCREMENTS_INDEX),
    )


# @intent:responsibility MachineImageをバイト列に変換します。
def encode_image(image: MachineImage) -> bytes:
    breakpoints = sorted(image.breakpoints)
    body = _BODY.pack(
        image.memory,
        bytes(image.registers),
        image.index & 0xFFFF,
        image.pc & 0xFFFF,
        *[value & 0xFFFF for value in image.stack],
        image.sp,
        image.delay_timer,
        image.sound_timer,
        image.framebuffer,
        int(image.changed),
        bytes(int(k) for k in image.keys),
        int(image.running),
        _encode_quirks(image.quirks),
        NO_LATCH if image.wait_latch is None else image.wait_latch,
        len(breakpoints),
    )
    tail = b"".join(_BREAKPOINT.pack(address) for address in breakpoints)
    return _HEADER.pack(MAGIC, VERSION) + body + tail


def _require_flags(name: str, values: bytes) -> None:
    invalid = set(values) - {0, 1}
    if invalid:
        raise InvalidSnapshotError(f"{name} must contain only 0/1 values, found {sorted(invalid)}")


def _require_bool(name: str, value: int) -> bool:
    if value not in (0, 1):
        raise InvalidSnapshotError(f"{name} flag must be 0 or 1, got {value}")
    return bool(value)


# @intent:responsibility バイト列を検証し、MachineImageに変換します。
# @intent:post-condition 構造上の不備がある場合は InvalidSnapshotError を送出します。既存のマシンには一切触れません。
def decode_image(data: bytes) -> MachineImage:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise InvalidSnapshotError(f"Snapshot must be bytes, got {type(data).__name__}")
    data = bytes(data)
    fixed_size = _HEADER.size + _BODY.size
    if len(data) < _HEADER.size:
        raise InvalidSnapshotError(f"Snapshot too short for header: {len(data)} bytes")

    magic, version = _HEADER.unpack_from(data, 0)
    if magic != MAGIC:
        raise InvalidSnapshotError(f"Bad snapshot magic {magic!r}, expected {MAGIC!r}")
    if version != VERSION:
        raise InvalidSnapshotError(f"Unsupported snapshot version {version}, expected {VERSION}")
    if len(data) < fixed_size:
        raise InvalidSnapshotError(f"Snapshot truncated: {len(data)} bytes, need at least {fixed_size}")

    fields = _BODY.unpack_from(data, _HEADER.size)
    memory, registers, index, pc = fields[0:4]
    stack = fields[4:4 + STACK_DEPTH]
    (sp, delay_timer, sound_timer, framebuffer, changed, keys,
     running, quirk_flags, latch, breakpoint_count) = fields[4 + STACK_DEPTH:]

    expected_size = fixed_size + breakpoint_count * _BREAKPOINT.size
    if len(data) != expected_size:
        raise InvalidSnapshotError(
            f"Snapshot length {len(data)} does not match expected {expected_size} "
            f"for {breakpoint_count} breakpoint(s)"
        )
    if sp > STACK_DEPTH:
        raise InvalidSnapshotError(f"Stack pointer {sp} exceeds stack depth {STACK_DEPTH}")
    _require_flags("framebuffer", framebuffer)
    _require_flags("keys", keys)
    if quirk_flags & ~_QUIRK_MASK:
        raise InvalidSnapshotError(f"Unknown quirk flags 0x{quirk_flags:02X}")
    if latch != NO_LATCH:
        if latch >= KEY_COUNT:
            raise InvalidSnapshotError(f"Key-wait latch {latch} is not a valid key")
        if not quirk_flags & _KEY_WAIT_ON_RELEASE:
            raise InvalidSnapshotError("Key-wait latch is set but the on-release quirk is off")
        opcode = (memory[pc % MEMORY_SIZE] << 8) | memory[(pc + 1) % MEMORY_SIZE]
        if opcode & 0xF0FF != 0xF00A:
            raise InvalidSnapshotError(
                f"Key-wait latch is set but opcode 0x{opcode:04X} at PC 0x{pc:04X} is not Fx0A"
            )

    breakpoints = frozenset(
        _BREAKPOINT.unpack_from(data, fixed_size + i * _BREAKPOINT.size)[0]
        for i in range(breakpoint_count)
    )
    return MachineImage(
        memory=memory,
        registers=tuple(registers),
        index=index,
        pc=pc,
        stack=tuple(stack),
        sp=sp,
        delay_timer=delay_timer,
        sound_timer=sound_timer,
        framebuffer=framebuffer,
        changed=_require_bool("changed", changed),
        keys=tuple(bool(k) for k in keys),
        running=_require_bool("running", running),
        quirks=_decode_quirks(quirk_flags),
        wait_latch=None if latch == NO_LATCH else latch,
        breakpoints=breakpoints,
    )
