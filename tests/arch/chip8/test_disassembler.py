# tests/arch/chip8/test_disassembler.py
"""
chip8_tracer.arch.chip8.disassemblerモジュールの単体テスト。
"""
import pytest
from chip8_tracer.transport.memory import Memory
from chip8_tracer.arch.chip8.disassembler import (
    disassemble, disassemble_opcode, disassembly_window, CURRENT_MARKER
)

# @intent:test_suite 全命令のニーモニック表記、未知の命令、PC周辺ウィンドウを検証します。

@pytest.mark.parametrize("opcode, expected", [
    (0x00E0, "CLS"),
    (0x00EE, "RET"),
    (0x0123, "SYS 0x123"),
    (0x1234, "JP 0x234"),
    (0x2ABC, "CALL 0xABC"),
    (0x3A55, "SE VA, 0x55"),
    (0x4A55, "SNE VA, 0x55"),
    (0x5AB0, "SE VA, VB"),
    (0x6A55, "LD VA, 0x55"),
    (0x7A01, "ADD VA, 0x01"),
    (0x8AB0, "LD VA, VB"),
    (0x8AB1, "OR VA, VB"),
    (0x8AB2, "AND VA, VB"),
    (0x8AB3, "XOR VA, VB"),
    (0x8AB4, "ADD VA, VB"),
    (0x8AB5, "SUB VA, VB"),
    (0x8AB6, "SHR VA"),
    (0x8AB7, "SUBN VA, VB"),
    (0x8ABE, "SHL VA"),
    (0x9AB0, "SNE VA, VB"),
    (0xA123, "LD I, 0x123"),
    (0xB123, "JP V0, 0x123"),
    (0xCA0F, "RND VA, 0x0F"),
    (0xD345, "DRW V3, V4, 5"),
    (0xE59E, "SKP V5"),
    (0xE5A1, "SKNP V5"),
    (0xF507, "LD V5, DT"),
    (0xF50A, "LD V5, K"),
    (0xF515, "LD DT, V5"),
    (0xF518, "LD ST, V5"),
    (0xF51E, "ADD I, V5"),
    (0xF529, "LD F, V5"),
    (0xF533, "LD B, V5"),
    (0xF555, "LD [I], V5"),
    (0xF565, "LD V5, [I]"),
])
# @intent:test_case_mnemonic 各命令語が期待されるニーモニックに変換されることを検証します。
def test_disassemble_opcode(opcode, expected):
    assert disassemble_opcode(opcode) == expected


@pytest.mark.parametrize("opcode, expected", [
    (0x8AB8, "UNKNOWN 8xx8"),
    (0x8ABF, "UNKNOWN 8xxF"),
    (0xE000, "UNKNOWN Ex00"),
    (0xE59F, "UNKNOWN Ex9F"),
    (0xF0FF, "UNKNOWN FxFF"),
    (0xF50B, "UNKNOWN Fx0B"),
    (0x5AB1, "UNKNOWN 5AB1"),
    (0x9AB1, "UNKNOWN 9AB1"),
])
# @intent:test_case_unknown 8/E/F グループの未定義サブ命令はグループ表記、それ以外は命令語全体で表示されることを検証します。
def test_disassemble_unknown(opcode, expected):
    assert disassemble_opcode(opcode) == expected


# @intent:test_case_total 全ての16bit値に対して例外を投げず、空でない文字列を返すことを検証します。
def test_disassemble_every_opcode():
    for opcode in range(0x10000):
        assert disassemble_opcode(opcode)


# @intent:test_case_mask 16bitを超える値は下位16bitで解釈されることを検証します。
def test_disassemble_masks_to_16_bits():
    assert disassemble_opcode(0x1D015) == "DRW V0, V1, 5"


# @intent:test_case_listing メモリ範囲の逆アセンブル結果が (アドレス, バイト列, ニーモニック) になることを検証します。
def test_disassemble_listing():
    memory = Memory()
    memory.load(0x200, [0x00, 0xE0, 0x12, 0x00])
    lines = disassemble(memory, 0x200, 4)
    assert lines == [
        (0x200, "00 E0", "CLS"),
        (0x202, "12 00", "JP 0x200"),
    ]


# @intent:test_case_window プログラム先頭では0x200未満が表示されず、現在行に印が付くことを検証します。
def test_window_at_program_start():
    memory = Memory()
    memory.load(0x200, [0x6A, 0x55])
    lines = disassembly_window(memory, 0x200)
    assert len(lines) == 10
    assert lines[0] == CURRENT_MARKER + "0x0200: LD VA, 0x55"
    assert lines[1] == "0x0202: SYS 0x000"


# @intent:test_case_window 前後10命令ずつ、計20行が生成されることを検証します。
def test_window_in_middle_of_memory():
    memory = Memory()
    lines = disassembly_window(memory, 0x300)
    assert len(lines) == 20
    assert lines[0].startswith("0x02EC: ")
    assert lines[10].startswith(CURRENT_MARKER + "0x0300: ")
    assert lines[-1].startswith("0x0312: ")


# @intent:test_case_window メモリ末尾を越える命令が表示されないことを検証します。
def test_window_at_end_of_memory():
    memory = Memory()
    lines = disassembly_window(memory, 0xFFE)
    assert lines[-1].startswith(CURRENT_MARKER + "0x0FFE: ")
    assert len(lines) == 11
