# src/chip8_tracer/arch/chip8/disassembler.py
"""
CHIP-8 Disassembler

命令語をCHIP-8のニーモニックに変換します。
Instruction Layerのデコードロジックを再利用するため、実行時とまったく同じ解釈で表示されます。
副作用はなく、共有状態も持ちません。
"""
from typing import List

from chip8_tracer.common.types import DisassemblyLine
from chip8_tracer.transport.memory import Memory
from chip8_tracer.arch.chip8.state import PROGRAM_START
from chip8_tracer.arch.chip8.instructions import decode_opcode

WINDOW_BEFORE = 10
WINDOW_AFTER = 10
CURRENT_MARKER = "► "


# @intent:responsibility 16bit命令語1つをニーモニック文字列に変換します。
# @intent:post-condition どのような値に対しても例外を投げず、未知の命令は "UNKNOWN xxxx" を返します。
def disassemble_opcode(opcode: int) -> str:
    return decode_opcode(opcode & 0xFFFF).render()


# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(memory: Memory, start_addr: int, length: int) -> List[DisassemblyLine]:
    """
    指定された範囲のメモリを2バイト単位で逆アセンブルします。

    Returns:
        List of (address, hex_bytes, mnemonic) tuples.
    """
    result = []
    current_addr = start_addr
    end_addr = min(start_addr + length, memory.get_size() - 1)

    while current_addr < end_addr:
        opcode = memory.read_word(current_addr)
        hex_bytes = f"{opcode >> 8:02X} {opcode & 0xFF:02X}"
        result.append((current_addr, hex_bytes, disassemble_opcode(opcode)))
        current_addr += 2

    return result


# @intent:responsibility PCの前後20命令分の逆アセンブル結果をデバッグ表示用の行として生成します。
# @intent:rationale プログラム領域外（0x200未満）と、2バイト目がメモリ外にはみ出すアドレスは表示しません。
def disassembly_window(memory: Memory, pc: int) -> List[str]:
    lines = []
    for i in range(-WINDOW_BEFORE, WINDOW_AFTER):
        addr = pc + i * 2
        if not (PROGRAM_START <= addr < memory.get_size() - 1):
            continue
        line = f"0x{addr:04X}: {disassemble_opcode(memory.read_word(addr))}"
        if addr == pc:
            line = CURRENT_MARKER + line
        lines.append(line)
    return lines
