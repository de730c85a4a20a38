# chip8_tracer/loader/loader.py
"""
ROMローダーモジュール。
ROMディレクトリ内の一覧取得と、ファイルからのROMイメージ読み込みをサポートします。
"""
import logging
import os
from typing import List

logger = logging.getLogger(__name__)

ROM_EXTENSIONS = (".ch8", ".c8")

class RomLoader:
    """
    ROMディレクトリ（既定では ./roms）からCHIP-8 ROMを探して読み込むローダー。
    """
    def __init__(self, roms_dir: str = "roms"):
        self.roms_dir = roms_dir

    # @intent:responsibility ROMディレクトリ内の .ch8 / .c8 ファイル名を列挙します。
    # @intent:post-condition ディレクトリが存在しない場合は空のリストを返します。
    def list_roms(self) -> List[str]:
        if not os.path.isdir(self.roms_dir):
            return []
        names = []
        for name in sorted(os.listdir(self.roms_dir)):
            path = os.path.join(self.roms_dir, name)
            if os.path.isfile(path) and name.lower().endswith(ROM_EXTENSIONS):
                names.append(name)
        return names

    def load_from_dir(self, name: str) -> bytes:
        if os.path.basename(name) != name:
            raise ValueError(f"ROM name must not contain a path: {name}")
        return self.load_from_path(os.path.join(self.roms_dir, name))

    # @intent:responsibility 任意のパスからROMイメージを読み込みます。I/Oエラーはそのまま呼び出し側へ伝播します。
    def load_from_path(self, path: str) -> bytes:
        with open(path, 'rb') as f:
            data = f.read()
        logger.debug("Read %d bytes from %s", len(data), path)
        return data
