"""
CHIP-8 仮想マシンの実装パッケージ。
"""
