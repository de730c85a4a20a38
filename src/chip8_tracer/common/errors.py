"""
例外と診断イベントの定義。

ホストに返す必要のあるエラー（ROMサイズ超過、不正なスナップショット）は例外として、
実行を止めない異常（未知のオペコード、スタック異常）は診断イベントとして扱います。
"""
from dataclasses import dataclass
from enum import Enum


class Chip8Error(Exception):
    """このパッケージが送出する例外の基底クラス。"""


# @intent:responsibility ROMがプログラム領域に収まらないことを表します。
class RomTooLargeError(Chip8Error, ValueError):
    def __init__(self, size: int, capacity: int):
        super().__init__(f"ROM size {size} exceeds available memory {capacity}")
        self.size = size
        self.capacity = capacity


# @intent:responsibility スナップショットの構造検証に失敗したことを表します。
class InvalidSnapshotError(Chip8Error, ValueError):
    pass


# @intent:responsibility 実行を継続したまま報告される診断イベントの種類を定義します。
class DiagnosticKind(Enum):
    UNKNOWN_OPCODE = "UNKNOWN_OPCODE"
    STACK_OVERFLOW = "STACK_OVERFLOW"
    STACK_UNDERFLOW = "STACK_UNDERFLOW"


@dataclass(frozen=True)
class Diagnostic:
    """
    サイクル実行中に検出された非致命的な異常の記録。
    pcは異常を起こした命令のアドレスです。
    """
    kind: DiagnosticKind
    pc: int
    opcode: int
    message: str
