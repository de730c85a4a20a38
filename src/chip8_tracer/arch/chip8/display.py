# src/chip8_tracer/arch/chip8/display.py
"""
CHIP-8 論理フレームバッファ。

64x32の1ビット画素を1バイト1画素で保持し、XOR描画と衝突検出を行います。
実際の画面への描画はホスト側の責務であり、ここでは論理的な内容のみを管理します。
"""
from typing import Iterable, Optional

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
SPRITE_WIDTH = 8

# @intent:responsibility 画素バッファと「内容が変化した」フラグを管理します。
class Framebuffer:
    """
    64x32のモノクロフレームバッファ。画素値は0または1。
    描画・消去の度に changed が True になり、clear_changed() でのみ戻ります。
    """
    def __init__(self):
        self._pixels = bytearray(DISPLAY_WIDTH * DISPLAY_HEIGHT)
        self.changed = False

    def clear(self) -> None:
        self._pixels[:] = bytes(len(self._pixels))
        self.changed = True

    # @intent:responsibility スプライトをXOR描画し、1から0に変化した画素があったかを返します。
    # @intent:rationale 折り返しはスプライト原点ではなく画素ごとに行います（x mod 64, y mod 32）。
    def draw_sprite(self, x: int, y: int, rows: Iterable[int]) -> bool:
        collision = False
        for row_offset, sprite_byte in enumerate(rows):
            py = (y + row_offset) % DISPLAY_HEIGHT
            for bit in range(SPRITE_WIDTH):
                if not sprite_byte & (0x80 >> bit):
                    continue
                px = (x + bit) % DISPLAY_WIDTH
                index = py * DISPLAY_WIDTH + px
                if self._pixels[index]:
                    collision = True
                self._pixels[index] ^= 1
        self.changed = True
        return collision

    def pixel(self, x: int, y: int) -> int:
        return self._pixels[(y % DISPLAY_HEIGHT) * DISPLAY_WIDTH + (x % DISPLAY_WIDTH)]

    def set_pixel(self, x: int, y: int, value: int) -> None:
        self._pixels[(y % DISPLAY_HEIGHT) * DISPLAY_WIDTH + (x % DISPLAY_WIDTH)] = 1 if value else 0

    # @intent:responsibility 画素と変化フラグを初期状態に戻します（clearと異なり changed は立てません）。
    def reset(self) -> None:
        self._pixels[:] = bytes(len(self._pixels))
        self.changed = False

    def clear_changed(self) -> None:
        self.changed = False

    # @intent:responsibility 画素バッファのコピーを返します。
    def snapshot(self) -> bytes:
        return bytes(self._pixels)

    # @intent:responsibility 変化があった場合のみ画素のコピーを返し、changedフラグを落とします。
    def take_changed(self) -> Optional[bytes]:
        if not self.changed:
            return None
        self.changed = False
        return self.snapshot()

    # @intent:responsibility スナップショットから画素列を復元します。値の検証は呼び出し側の責務です。
    def restore(self, pixels: bytes, changed: bool) -> None:
        if len(pixels) != len(self._pixels):
            raise ValueError(f"Framebuffer expects {len(self._pixels)} pixels, got {len(pixels)}.")
        self._pixels[:] = pixels
        self.changed = changed

    def render_text(self, on: str = "#", off: str = ".") -> str:
        """デバッグ用に画素をテキストで描画します。"""
        lines = []
        for y in range(DISPLAY_HEIGHT):
            row = self._pixels[y * DISPLAY_WIDTH:(y + 1) * DISPLAY_WIDTH]
            lines.append("".join(on if p else off for p in row))
        return "\n".join(lines)
