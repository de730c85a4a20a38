# src/chip8_tracer/arch/chip8/timers.py
"""
ディレイタイマーとサウンドタイマー。
"""


# @intent:responsibility 60Hzで外部から減算される2つの8bitカウントダウンレジスタを保持します。
# @intent:rationale tick() 以外の経路で値が減ることはありません。命令側は読み書きのみを行います。
class Timers:
    def __init__(self):
        self.delay = 0
        self.sound = 0

    def tick(self) -> None:
        if self.delay > 0:
            self.delay -= 1
        if self.sound > 0:
            self.sound -= 1

    @property
    def sound_active(self) -> bool:
        """ホストがビープ音を鳴らすべき状態かどうか。"""
        return self.sound > 0

    def reset(self) -> None:
        self.delay = 0
        self.sound = 0
