# tests/arch/chip8/test_display.py
"""
chip8_tracer.arch.chip8.displayモジュールと画面命令の単体テスト。
"""
import pytest
from chip8_tracer.arch.chip8.display import Framebuffer, DISPLAY_WIDTH, DISPLAY_HEIGHT
from chip8_tracer.arch.chip8.machine import Chip8Machine

# @intent:test_suite フレームバッファのXOR描画、折り返し、衝突検出、変化フラグを検証します。

class TestFramebuffer:
    """
    Framebufferの単体テスト。
    """
    # @intent:test_case_init 初期状態で全画素が0、変化フラグが False であることを検証します。
    def test_initial_state(self):
        fb = Framebuffer()
        assert fb.snapshot() == bytes(DISPLAY_WIDTH * DISPLAY_HEIGHT)
        assert fb.changed is False

    # @intent:test_case_draw 1行のスプライトが左上から描画されることを検証します。
    def test_draw_sprite_row(self):
        fb = Framebuffer()
        collision = fb.draw_sprite(0, 0, [0xA0])
        assert collision is False
        assert [fb.pixel(x, 0) for x in range(4)] == [1, 0, 1, 0]
        assert fb.changed is True

    # @intent:test_case_wrap 右端を越えた画素が同じ行の左端に折り返すことを検証します。
    def test_horizontal_wrap_per_pixel(self):
        fb = Framebuffer()
        fb.draw_sprite(63, 0, [0xC0])
        assert fb.pixel(63, 0) == 1
        assert fb.pixel(0, 0) == 1
        assert fb.pixel(0, 1) == 0

    # @intent:test_case_wrap 下端を越えた行が上端に折り返すことを検証します。
    def test_vertical_wrap_per_pixel(self):
        fb = Framebuffer()
        fb.draw_sprite(0, 31, [0x80, 0x80])
        assert fb.pixel(0, 31) == 1
        assert fb.pixel(0, 0) == 1

    # @intent:test_case_collision 同じスプライトを2回描くと消去され、衝突が報告されることを検証します。
    def test_redraw_erases_and_collides(self):
        fb = Framebuffer()
        assert fb.draw_sprite(10, 10, [0xFF, 0x81]) is False
        assert fb.draw_sprite(10, 10, [0xFF, 0x81]) is True
        assert fb.snapshot() == bytes(DISPLAY_WIDTH * DISPLAY_HEIGHT)

    # @intent:test_case_collision 0→1の変化だけでは衝突にならないことを検証します。
    def test_no_collision_on_disjoint_pixels(self):
        fb = Framebuffer()
        fb.draw_sprite(0, 0, [0xF0])
        assert fb.draw_sprite(0, 0, [0x0F]) is False

    # @intent:test_case_changed take_changed が変化時のみコピーを返し、フラグを落とすことを検証します。
    def test_take_changed(self):
        fb = Framebuffer()
        assert fb.take_changed() is None
        fb.clear()
        pixels = fb.take_changed()
        assert pixels == bytes(DISPLAY_WIDTH * DISPLAY_HEIGHT)
        assert fb.take_changed() is None

    # @intent:test_case_restore 画素数が一致しない復元は ValueError になることを検証します。
    def test_restore_rejects_wrong_length(self):
        fb = Framebuffer()
        with pytest.raises(ValueError):
            fb.restore(b"\x00" * 10, False)

    # @intent:test_case_render テキスト描画が画素配置を反映することを検証します。
    def test_render_text(self):
        fb = Framebuffer()
        fb.set_pixel(1, 0, 1)
        lines = fb.render_text().split("\n")
        assert len(lines) == DISPLAY_HEIGHT
        assert lines[0].startswith(".#..")


class TestDisplayInstructions:
    """
    CLS / DRW 命令の検証。
    """
    @pytest.fixture
    def machine(self):
        return Chip8Machine(seed=0)

    # @intent:test_case_cls 00E0 が画面を消去し、変化フラグを立てることを検証します。
    def test_cls(self, machine):
        machine.framebuffer.set_pixel(0, 0, 1)
        machine.load_rom([0x00, 0xE0])
        machine.cycle()
        assert machine.framebuffer.pixel(0, 0) == 0
        assert machine.framebuffer.changed is True
        assert machine.state.pc == 0x202

    # @intent:test_case_drw フォント字形'0'の描画と、2回目の描画での衝突を検証します。
    def test_draw_font_glyph_twice(self, machine):
        # LD V0, 0 / LD F, V0 / DRW V0, V1, 5 / DRW V0, V1, 5
        machine.load_rom([0x60, 0x00, 0xF0, 0x29, 0xD0, 0x15, 0xD0, 0x15])
        for _ in range(3):
            machine.cycle()
        fb = machine.framebuffer
        assert [fb.pixel(x, 0) for x in range(5)] == [1, 1, 1, 1, 0]
        assert [fb.pixel(x, 1) for x in range(5)] == [1, 0, 0, 1, 0]
        assert machine.state.vf == 0

        machine.cycle()
        assert fb.pixel(0, 0) == 0
        assert machine.state.vf == 1

    # @intent:test_case_drw 座標が画面外の場合も画素ごとに折り返して描画されることを検証します。
    def test_draw_at_right_edge(self, machine):
        machine.memory.write(0x300, 0xC0)
        # LD VA, 63 / LD VB, 0 / LD I, 0x300 / DRW VA, VB, 1
        machine.load_rom([0x6A, 0x3F, 0x6B, 0x00, 0xA3, 0x00, 0xDA, 0xB1])
        for _ in range(4):
            machine.cycle()
        assert machine.framebuffer.pixel(63, 0) == 1
        assert machine.framebuffer.pixel(0, 0) == 1

    # @intent:test_case_drw n=0 の描画は何も描かず VF を0にすることを検証します。
    def test_draw_zero_rows(self, machine):
        machine.load_rom([0x6F, 0x01, 0xD0, 0x00])
        machine.cycle()
        machine.cycle()
        assert machine.state.vf == 0
        assert machine.framebuffer.snapshot() == bytes(DISPLAY_WIDTH * DISPLAY_HEIGHT)

    # @intent:test_case_changed clear_changed が画素を変えずにフラグだけを落とすことを検証します。
    def test_clear_changed(self, machine):
        machine.load_rom([0x00, 0xE0])
        machine.cycle()
        machine.framebuffer.clear_changed()
        assert machine.take_changed_framebuffer() is None
