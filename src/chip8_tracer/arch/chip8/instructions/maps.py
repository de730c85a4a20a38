# src/chip8_tracer/arch/chip8/instructions/maps.py
"""
オペコードと命令実装のマッピング定義。
"""
from typing import Callable, Dict, List, Tuple

from . import alu
from . import control
from . import display
from . import load
from .base import InstructionKind as K, OpcodeFields

# @intent:map (mask, match, kind) の照合テーブル。先頭から順に評価し、最初に一致したものを採用します。
DECODE_MAP: List[Tuple[int, int, K]] = [
    # 0x0
    (0xFFFF, 0x00E0, K.CLS),
    (0xFFFF, 0x00EE, K.RET),
    (0xF000, 0x0000, K.SYS),
    # Control
    (0xF000, 0x1000, K.JP),
    (0xF000, 0x2000, K.CALL),
    (0xF000, 0x3000, K.SE_VX_NN),
    (0xF000, 0x4000, K.SNE_VX_NN),
    (0xF00F, 0x5000, K.SE_VX_VY),
    # Load / ALU
    (0xF000, 0x6000, K.LD_VX_NN),
    (0xF000, 0x7000, K.ADD_VX_NN),
    (0xF00F, 0x8000, K.LD_VX_VY),
    (0xF00F, 0x8001, K.OR),
    (0xF00F, 0x8002, K.AND),
    (0xF00F, 0x8003, K.XOR),
    (0xF00F, 0x8004, K.ADD_VX_VY),
    (0xF00F, 0x8005, K.SUB),
    (0xF00F, 0x8006, K.SHR),
    (0xF00F, 0x8007, K.SUBN),
    (0xF00F, 0x800E, K.SHL),
    (0xF00F, 0x9000, K.SNE_VX_VY),
    (0xF000, 0xA000, K.LD_I),
    (0xF000, 0xB000, K.JP_V0),
    (0xF000, 0xC000, K.RND),
    (0xF000, 0xD000, K.DRW),
    # Keys
    (0xF0FF, 0xE09E, K.SKP),
    (0xF0FF, 0xE0A1, K.SKNP),
    # 0xF
    (0xF0FF, 0xF007, K.LD_VX_DT),
    (0xF0FF, 0xF00A, K.LD_VX_K),
    (0xF0FF, 0xF015, K.LD_DT_VX),
    (0xF0FF, 0xF018, K.LD_ST_VX),
    (0xF0FF, 0xF01E, K.ADD_I_VX),
    (0xF0FF, 0xF029, K.LD_F_VX),
    (0xF0FF, 0xF033, K.LD_B_VX),
    (0xF0FF, 0xF055, K.LD_MEM_VX),
    (0xF0FF, 0xF065, K.LD_VX_MEM),
]


def _vx(f: OpcodeFields) -> str:
    return f"V{f.x:X}"

def _vy(f: OpcodeFields) -> str:
    return f"V{f.y:X}"

def _addr(f: OpcodeFields) -> str:
    return f"0x{f.nnn:03X}"

def _byte(f: OpcodeFields) -> str:
    return f"0x{f.nn:02X}"

# @intent:rationale 8/E/F グループ内の未定義サブ命令はグループ名と下位桁で、それ以外は命令語全体で表記します。
def _unknown(f: OpcodeFields) -> str:
    group = f.opcode >> 12
    if group == 0x8:
        return f"8xx{f.n:X}"
    if group == 0xE:
        return f"Ex{f.nn:02X}"
    if group == 0xF:
        return f"Fx{f.nn:02X}"
    return f"{f.opcode:04X}"


# @intent:map 命令種別からニーモニックとオペランド書式へのマッピングテーブル。
MNEMONIC_MAP: Dict[K, Tuple[str, Callable[[OpcodeFields], Tuple[str, ...]]]] = {
    K.CLS: ("CLS", lambda f: ()),
    K.RET: ("RET", lambda f: ()),
    K.SYS: ("SYS", lambda f: (_addr(f),)),
    K.JP: ("JP", lambda f: (_addr(f),)),
    K.CALL: ("CALL", lambda f: (_addr(f),)),
    K.SE_VX_NN: ("SE", lambda f: (_vx(f), _byte(f))),
    K.SNE_VX_NN: ("SNE", lambda f: (_vx(f), _byte(f))),
    K.SE_VX_VY: ("SE", lambda f: (_vx(f), _vy(f))),
    K.LD_VX_NN: ("LD", lambda f: (_vx(f), _byte(f))),
    K.ADD_VX_NN: ("ADD", lambda f: (_vx(f), _byte(f))),
    K.LD_VX_VY: ("LD", lambda f: (_vx(f), _vy(f))),
    K.OR: ("OR", lambda f: (_vx(f), _vy(f))),
    K.AND: ("AND", lambda f: (_vx(f), _vy(f))),
    K.XOR: ("XOR", lambda f: (_vx(f), _vy(f))),
    K.ADD_VX_VY: ("ADD", lambda f: (_vx(f), _vy(f))),
    K.SUB: ("SUB", lambda f: (_vx(f), _vy(f))),
    K.SHR: ("SHR", lambda f: (_vx(f),)),
    K.SUBN: ("SUBN", lambda f: (_vx(f), _vy(f))),
    K.SHL: ("SHL", lambda f: (_vx(f),)),
    K.SNE_VX_VY: ("SNE", lambda f: (_vx(f), _vy(f))),
    K.LD_I: ("LD", lambda f: ("I", _addr(f))),
    K.JP_V0: ("JP", lambda f: ("V0", _addr(f))),
    K.RND: ("RND", lambda f: (_vx(f), _byte(f))),
    K.DRW: ("DRW", lambda f: (_vx(f), _vy(f), str(f.n))),
    K.SKP: ("SKP", lambda f: (_vx(f),)),
    K.SKNP: ("SKNP", lambda f: (_vx(f),)),
    K.LD_VX_DT: ("LD", lambda f: (_vx(f), "DT")),
    K.LD_VX_K: ("LD", lambda f: (_vx(f), "K")),
    K.LD_DT_VX: ("LD", lambda f: ("DT", _vx(f))),
    K.LD_ST_VX: ("LD", lambda f: ("ST", _vx(f))),
    K.ADD_I_VX: ("ADD", lambda f: ("I", _vx(f))),
    K.LD_F_VX: ("LD", lambda f: ("F", _vx(f))),
    K.LD_B_VX: ("LD", lambda f: ("B", _vx(f))),
    K.LD_MEM_VX: ("LD", lambda f: ("[I]", _vx(f))),
    K.LD_VX_MEM: ("LD", lambda f: (_vx(f), "[I]")),
    K.UNKNOWN: ("UNKNOWN", lambda f: (_unknown(f),)),
}

# @intent:map 命令種別から実行関数へのマッピングテーブル。
# @intent:rationale SYS (0nnn) はデコードのみ行い、実行関数を持ちません。実行時は未知の命令と同じ扱いになります。
EXECUTE_MAP = {
    # Display
    K.CLS: display.execute_cls,
    K.DRW: display.execute_drw,

    # Control
    K.RET: control.execute_ret,
    K.JP: control.execute_jp,
    K.CALL: control.execute_call,
    K.SE_VX_NN: control.execute_se_vx_nn,
    K.SNE_VX_NN: control.execute_sne_vx_nn,
    K.SE_VX_VY: control.execute_se_vx_vy,
    K.SNE_VX_VY: control.execute_sne_vx_vy,
    K.JP_V0: control.execute_jp_v0,
    K.SKP: control.execute_skp,
    K.SKNP: control.execute_sknp,

    # ALU
    K.ADD_VX_NN: alu.execute_add_vx_nn,
    K.LD_VX_VY: alu.execute_ld_vx_vy,
    K.OR: alu.execute_or,
    K.AND: alu.execute_and,
    K.XOR: alu.execute_xor,
    K.ADD_VX_VY: alu.execute_add_vx_vy,
    K.SUB: alu.execute_sub,
    K.SHR: alu.execute_shr,
    K.SUBN: alu.execute_subn,
    K.SHL: alu.execute_shl,
    K.RND: alu.execute_rnd,

    # Load
    K.LD_VX_NN: load.execute_ld_vx_nn,
    K.LD_I: load.execute_ld_i,
    K.ADD_I_VX: load.execute_add_i_vx,
    K.LD_VX_DT: load.execute_ld_vx_dt,
    K.LD_VX_K: load.execute_ld_vx_k,
    K.LD_DT_VX: load.execute_ld_dt_vx,
    K.LD_ST_VX: load.execute_ld_st_vx,
    K.LD_F_VX: load.execute_ld_f_vx,
    K.LD_B_VX: load.execute_ld_b_vx,
    K.LD_MEM_VX: load.execute_ld_mem_vx,
    K.LD_VX_MEM: load.execute_ld_vx_mem,
}
