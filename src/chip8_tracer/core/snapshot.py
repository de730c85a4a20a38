# chip8_tracer/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、デコード済み命令の記録と、デバッグ表示用のマシン状態を
不変のデータ構造として定義します。UIへの情報提供と、デバッグ時の状態記録に用いる責務を負います。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Tuple


# @intent:responsibility デコードされた命令の詳細を記録します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    デコードされた命令の詳細（種別、ニーモニック、オペランド、各ビットフィールド）を記録するデータクラス。
    """
    opcode: int # 例: 0xD015
    kind: Enum # 命令種別 (InstructionKind)
    mnemonic: str # 例: "DRW"
    operands: Tuple[str, ...] = field(default_factory=tuple) # 例: ("V0", "V1", "5")
    x: int = 0   # bits 8-11
    y: int = 0   # bits 4-7
    n: int = 0   # bits 0-3
    nn: int = 0  # bits 0-7
    nnn: int = 0 # bits 0-11
    length: int = 2 # 命令のバイト長

    @property
    def opcode_hex(self) -> str:
        return f"{self.opcode:04X}"

    def render(self) -> str:
        """'DRW V3, V4, 5' 形式の文字列を返します。"""
        if self.operands:
            return f"{self.mnemonic} " + ", ".join(self.operands)
        return self.mnemonic


# @intent:responsibility デバッグ表示用に、ある一時点のマシン状態を不変に記録します。
# @intent:rationale 可変な内部配列への参照を渡さないよう、全てタプル/frozensetのコピーで保持します。
@dataclass(frozen=True)
class DebugSnapshot:
    """
    レジスタ、スタック、タイマー、PC周辺の逆アセンブル結果、ブレークポイントを保持する不変データ。
    """
    pc: int
    index: int
    sp: int
    delay_timer: int
    sound_timer: int
    registers: Tuple[int, ...]
    stack: Tuple[int, ...]
    disassembly: Tuple[str, ...]
    breakpoints: FrozenSet[int]
    running: bool
