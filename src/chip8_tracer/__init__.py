"""
CHIP-8 仮想マシンのコア実装。
"""
from chip8_tracer.arch.chip8.machine import Chip8Machine
from chip8_tracer.arch.chip8.session import MachineSession
from chip8_tracer.arch.chip8.disassembler import disassemble_opcode
from chip8_tracer.common.errors import (
    Chip8Error,
    Diagnostic,
    DiagnosticKind,
    InvalidSnapshotError,
    RomTooLargeError,
)
from chip8_tracer.config.models import MachineConfig, QuirkConfig

__all__ = [
    "Chip8Machine",
    "MachineSession",
    "disassemble_opcode",
    "Chip8Error",
    "Diagnostic",
    "DiagnosticKind",
    "InvalidSnapshotError",
    "RomTooLargeError",
    "MachineConfig",
    "QuirkConfig",
]
