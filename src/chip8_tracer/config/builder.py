from chip8_tracer.arch.chip8.machine import Chip8Machine
from chip8_tracer.arch.chip8.session import MachineSession
from .models import MachineConfig

# @intent:responsibility マシン構成（Config）に基づいて、Chip8Machine を生成します。
class MachineBuilder:
    def build_machine(self, config: MachineConfig) -> Chip8Machine:
        return Chip8Machine(quirks=config.quirks, seed=config.seed)

    # @intent:responsibility 生成したマシンをスレッドセーフな MachineSession に包んで返します。
    def build_session(self, config: MachineConfig) -> MachineSession:
        return MachineSession(self.build_machine(config))
