# src/chip8_tracer/arch/chip8/keypad.py
"""
16キーの入力ラッチ。

ホスト（UIスレッドなど）が key_down / key_up で状態を更新し、
命令実装（Ex9E, ExA1, Fx0A）が読み出します。
"""
from typing import List, Optional

KEY_COUNT = 16


# @intent:responsibility 16個のキー押下状態と、Fx0A のキー待ちラッチを保持します。
class Keypad:
    def __init__(self):
        self._keys: List[bool] = [False] * KEY_COUNT
        # 離され待ちのキー（key_wait_on_release 使用時のみ）
        self.wait_latch: Optional[int] = None

    # @intent:rationale 範囲外のキー番号は黙って無視します。ホストの入力源は任意の値を送ってくる可能性があるためです。
    def key_down(self, key: int) -> None:
        if 0 <= key < KEY_COUNT:
            self._keys[key] = True

    def key_up(self, key: int) -> None:
        if 0 <= key < KEY_COUNT:
            self._keys[key] = False

    def is_pressed(self, key: int) -> bool:
        return self._keys[key & 0xF]

    def first_pressed(self) -> Optional[int]:
        for key, pressed in enumerate(self._keys):
            if pressed:
                return key
        return None

    # @intent:responsibility Fx0A のキー待ちを1回評価し、完了した場合はキー番号を返します。
    # @intent:post-condition None を返した場合、呼び出し側は同じ命令を再実行させる必要があります。
    def poll_key_wait(self, on_release: bool) -> Optional[int]:
        """
        on_release=False: いずれかのキーが押されていれば即座に完了（押下中で判定）。
        on_release=True: 最初に押されたキーをラッチし、そのキーが離された時点で完了。
        """
        if not on_release:
            return self.first_pressed()

        if self.wait_latch is None:
            self.wait_latch = self.first_pressed()
            return None

        if self._keys[self.wait_latch]:
            return None
        key = self.wait_latch
        self.wait_latch = None
        return key

    def states(self) -> List[bool]:
        return list(self._keys)

    def restore(self, states: List[bool], wait_latch: Optional[int]) -> None:
        if len(states) != KEY_COUNT:
            raise ValueError(f"Keypad expects {KEY_COUNT} key states, got {len(states)}.")
        self._keys = [bool(s) for s in states]
        self.wait_latch = wait_latch

    def reset(self) -> None:
        self._keys = [False] * KEY_COUNT
        self.wait_latch = None
