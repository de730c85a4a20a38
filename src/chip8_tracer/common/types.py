"""
共通の型定義を提供するモジュール。
プロジェクト全体で使用される汎用的な型エイリアスなどを定義します。
"""
from typing import Tuple

# @intent:data_structure 逆アセンブル結果の1行 (address, hex_bytes, mnemonic)。
DisassemblyLine = Tuple[int, str, str]
