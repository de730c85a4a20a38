"""
マシン構成（クォーク設定、乱数シード）の読み込みと構築。
"""
