import unittest
from chip8_tracer.arch.chip8.machine import Chip8Machine
from chip8_tracer.arch.chip8.font import FONT_BASE, glyph_address
from chip8_tracer.config.models import QuirkConfig


def _program(*words):
    data = bytearray()
    for word in words:
        data += bytes([word >> 8, word & 0xFF])
    return bytes(data)


class TestChip8LoadInstructions(unittest.TestCase):
    def setUp(self):
        self._build()

    def _build(self, quirks=QuirkConfig()):
        self.machine = Chip8Machine(quirks=quirks, seed=0)
        self.state = self.machine.state

    def _run(self, *words):
        self.machine.load_rom(_program(*words))
        for _ in words:
            self.machine.cycle()

    def test_ld_vx_nn(self):
        self._run(0x6A55)
        self.assertEqual(self.state.v[0xA], 0x55)
        self.assertEqual(self.state.pc, 0x202)

    def test_ld_i(self):
        self._run(0xA123)
        self.assertEqual(self.state.index, 0x123)

    def test_add_i_vx(self):
        self._run(0xA123, 0x6A02, 0xFA1E)
        self.assertEqual(self.state.index, 0x125)

    def test_add_i_vx_wraps_at_16_bits(self):
        self.machine.load_rom(_program(0x6A02, 0xFA1E))
        self.state.index = 0xFFFF
        self.machine.cycle()
        self.machine.cycle()
        self.assertEqual(self.state.index, 0x0001)

    def test_ld_f_vx(self):
        self._run(0x6A0A, 0xFA29)
        self.assertEqual(self.state.index, FONT_BASE + 0x0A * 5)
        self.assertEqual(self.state.index, glyph_address(0xA))

    def test_ld_b_vx(self):
        self._run(0x6A9C, 0xA300, 0xFA33)
        self.assertEqual(self.machine.memory_dump(0x300, 3), bytes([1, 5, 6]))

    def test_ld_mem_vx_increments_index(self):
        self._run(0x6001, 0x6102, 0x6203, 0xA300, 0xF255)
        self.assertEqual(self.machine.memory_dump(0x300, 4), bytes([1, 2, 3, 0]))
        self.assertEqual(self.state.index, 0x303)

    def test_ld_vx_mem_increments_index(self):
        self.machine.memory.load(0x300, [7, 8, 9])
        self._run(0xA300, 0xF265)
        self.assertEqual(self.state.v[0:3], [7, 8, 9])
        self.assertEqual(self.state.v[3], 0)
        self.assertEqual(self.state.index, 0x303)

    def test_load_store_keeps_index_without_quirk(self):
        self._build(QuirkConfig(load_store_increments_index=False))
        self._run(0x6001, 0xA300, 0xF055, 0xF065)
        self.assertEqual(self.machine.memory.read(0x300), 1)
        self.assertEqual(self.state.index, 0x300)

    def test_timer_transfers(self):
        self._run(0x6A3C, 0xFA15, 0xFA18, 0xFB07)
        self.assertEqual(self.machine.timers.delay, 60)
        self.assertEqual(self.machine.timers.sound, 60)
        self.assertEqual(self.state.v[0xB], 60)
        self.assertTrue(self.machine.sound_active)

        self.machine.tick()
        self.assertEqual(self.machine.timers.delay, 59)
        self.assertEqual(self.machine.timers.sound, 59)

    def test_key_wait_repeats_until_key_held(self):
        self.machine.load_rom(_program(0xF50A))
        self.machine.cycle()
        self.assertEqual(self.state.pc, 0x200)
        self.machine.cycle()
        self.assertEqual(self.state.pc, 0x200)

        self.machine.key_down(0xC)
        self.machine.key_down(7)
        self.machine.cycle()
        self.assertEqual(self.state.v[5], 7)
        self.assertEqual(self.state.pc, 0x202)

    def test_key_wait_on_release_quirk(self):
        self._build(QuirkConfig(key_wait_on_release=True))
        self.machine.load_rom(_program(0xF50A))
        self.machine.key_down(3)
        self.machine.cycle()
        self.assertEqual(self.state.pc, 0x200)
        self.assertEqual(self.machine.keypad.wait_latch, 3)

        self.machine.cycle()
        self.assertEqual(self.state.pc, 0x200)

        self.machine.key_up(3)
        self.machine.cycle()
        self.assertEqual(self.state.v[5], 3)
        self.assertEqual(self.state.pc, 0x202)
        self.assertIsNone(self.machine.keypad.wait_latch)


if __name__ == '__main__':
    unittest.main()
