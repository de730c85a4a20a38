from dataclasses import dataclass, field
from typing import Optional

@dataclass(frozen=True)
class QuirkConfig:
    shift_uses_vy: bool = False  # True: 8xy6/8xyE は Vy をシフトして Vx に格納 (COSMAC VIP)
    key_wait_on_release: bool = False  # True: Fx0A はキーが離された時点で完了
    load_store_increments_index: bool = True  # True: Fx55/Fx65 の後に I += x + 1

@dataclass
class MachineConfig:
    quirks: QuirkConfig = field(default_factory=QuirkConfig)
    seed: Optional[int] = None  # 指定時は reset の度にこのシードで乱数を初期化する
