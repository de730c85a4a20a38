# tests/loader/test_loader.py
"""
chip8_tracer.loader.loaderモジュールの単体テスト。
"""
import pytest
from chip8_tracer.loader.loader import RomLoader

# @intent:test_suite ROMディレクトリの列挙とROMファイルの読み込みを検証します。

class TestRomLoader:
    @pytest.fixture
    def roms_dir(self, tmp_path):
        (tmp_path / "pong.ch8").write_bytes(b"\x00\xE0")
        (tmp_path / "TETRIS.C8").write_bytes(b"\x12\x00")
        (tmp_path / "readme.txt").write_text("not a rom")
        (tmp_path / "nested.ch8").mkdir()
        return tmp_path

    # @intent:test_case_list 拡張子が .ch8 / .c8 のファイルのみが列挙されることを検証します。
    def test_list_roms(self, roms_dir):
        loader = RomLoader(str(roms_dir))
        assert loader.list_roms() == ["TETRIS.C8", "pong.ch8"]

    # @intent:test_case_list 存在しないディレクトリでは空のリストを返すことを検証します。
    def test_list_roms_missing_dir(self, tmp_path):
        assert RomLoader(str(tmp_path / "missing")).list_roms() == []

    # @intent:test_case_load ディレクトリ内のROMを名前で読み込めることを検証します。
    def test_load_from_dir(self, roms_dir):
        assert RomLoader(str(roms_dir)).load_from_dir("pong.ch8") == b"\x00\xE0"

    # @intent:test_case_load パスを含む名前は拒否されることを検証します。
    def test_load_from_dir_rejects_paths(self, roms_dir):
        with pytest.raises(ValueError):
            RomLoader(str(roms_dir)).load_from_dir("../pong.ch8")

    # @intent:test_case_load 存在しないファイルの読み込みは OSError になることを検証します。
    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RomLoader().load_from_path(str(tmp_path / "none.ch8"))
