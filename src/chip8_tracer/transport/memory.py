# chip8_tracer/transport/memory.py
"""
Transport Layer (メモリ空間)

このモジュールは、CHIP-8の4KBアドレス空間を保持し、
命令実装からの読み書きを受け付ける責務を負います。
"""
from typing import Iterable

MEMORY_SIZE = 4096

# @intent:responsibility 4096バイトのメモリ空間を提供します。
# @intent:rationale アドレスは常に4096でラップします。命令のフィールドやIレジスタから導出されたアドレスが
#                  範囲外を指しても例外を投げず、実機と同様に空間内で折り返します。
class Memory:
    """
    CHIP-8のメインメモリ。アドレスは4096バイト空間でラップされ、値は8bitにマスクされます。
    """
    def __init__(self, size: int = MEMORY_SIZE):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("Memory size must be a positive integer.")
        self._memory = bytearray(size)
        self._size = size

    def _wrap(self, address: int) -> int:
        return address % self._size

    def read(self, address: int) -> int:
        return self._memory[self._wrap(address)]

    def write(self, address: int, data: int) -> None:
        self._memory[self._wrap(address)] = data & 0xFF

    # @intent:utility_function ビッグエンディアンの16bitワードを読み込みます。
    def read_word(self, address: int) -> int:
        """Big-endian 16-bit read."""
        return (self.read(address) << 8) | self.read(address + 1)

    # @intent:responsibility 指定アドレスからバイト列を一括で書き込みます。ROMロードとフォント配置に使用します。
    def load(self, address: int, data: Iterable[int]) -> None:
        for offset, value in enumerate(data):
            self.write(address + offset, value)

    # @intent:responsibility 指定範囲のコピーを返します。内部バッファへの参照は渡しません。
    def dump(self, start: int, length: int) -> bytes:
        return bytes(self.read(start + i) for i in range(length))

    def raw(self) -> bytes:
        return bytes(self._memory)

    def clear(self) -> None:
        self._memory[:] = bytes(self._size)

    def get_size(self) -> int:
        return self._size
