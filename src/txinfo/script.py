"""
Bitcoin script helpers: opcode names, disassembly and output template matching.

Template predicates only look at byte patterns (they do not validate that
embedded public keys are on the curve), the same way Bitcoin Core's
`Solver` recognises standard output types.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

# Opcodes referenced by the standard templates
OP_0 = 0x00
OP_PUSHBYTES_20 = 0x14
OP_PUSHBYTES_32 = 0x20
OP_PUSHBYTES_33 = 0x21
OP_PUSHBYTES_65 = 0x41
OP_PUSHDATA1 = 0x4C
OP_PUSHDATA2 = 0x4D
OP_PUSHDATA4 = 0x4E
OP_1 = 0x51
OP_DUP = 0x76
OP_EQUAL = 0x87
OP_EQUALVERIFY = 0x88
OP_HASH160 = 0xA9
OP_CHECKSIG = 0xAC

_NAMED_OPCODES: dict[int, str] = {
    0x4C: "OP_PUSHDATA1",
    0x4D: "OP_PUSHDATA2",
    0x4E: "OP_PUSHDATA4",
    0x4F: "OP_PUSHNUM_NEG1",
    0x50: "OP_RESERVED",
    0x61: "OP_NOP",
    0x62: "OP_VER",
    0x63: "OP_IF",
    0x64: "OP_NOTIF",
    0x65: "OP_VERIF",
    0x66: "OP_VERNOTIF",
    0x67: "OP_ELSE",
    0x68: "OP_ENDIF",
    0x69: "OP_VERIFY",
    0x6A: "OP_RETURN",
    0x6B: "OP_TOALTSTACK",
    0x6C: "OP_FROMALTSTACK",
    0x6D: "OP_2DROP",
    0x6E: "OP_2DUP",
    0x6F: "OP_3DUP",
    0x70: "OP_2OVER",
    0x71: "OP_2ROT",
    0x72: "OP_2SWAP",
    0x73: "OP_IFDUP",
    0x74: "OP_DEPTH",
    0x75: "OP_DROP",
    0x76: "OP_DUP",
    0x77: "OP_NIP",
    0x78: "OP_OVER",
    0x79: "OP_PICK",
    0x7A: "OP_ROLL",
    0x7B: "OP_ROT",
    0x7C: "OP_SWAP",
    0x7D: "OP_TUCK",
    0x7E: "OP_CAT",
    0x7F: "OP_SUBSTR",
    0x80: "OP_LEFT",
    0x81: "OP_RIGHT",
    0x82: "OP_SIZE",
    0x83: "OP_INVERT",
    0x84: "OP_AND",
    0x85: "OP_OR",
    0x86: "OP_XOR",
    0x87: "OP_EQUAL",
    0x88: "OP_EQUALVERIFY",
    0x89: "OP_RESERVED1",
    0x8A: "OP_RESERVED2",
    0x8B: "OP_1ADD",
    0x8C: "OP_1SUB",
    0x8D: "OP_2MUL",
    0x8E: "OP_2DIV",
    0x8F: "OP_NEGATE",
    0x90: "OP_ABS",
    0x91: "OP_NOT",
    0x92: "OP_0NOTEQUAL",
    0x93: "OP_ADD",
    0x94: "OP_SUB",
    0x95: "OP_MUL",
    0x96: "OP_DIV",
    0x97: "OP_MOD",
    0x98: "OP_LSHIFT",
    0x99: "OP_RSHIFT",
    0x9A: "OP_BOOLAND",
    0x9B: "OP_BOOLOR",
    0x9C: "OP_NUMEQUAL",
    0x9D: "OP_NUMEQUALVERIFY",
    0x9E: "OP_NUMNOTEQUAL",
    0x9F: "OP_LESSTHAN",
    0xA0: "OP_GREATERTHAN",
    0xA1: "OP_LESSTHANOREQUAL",
    0xA2: "OP_GREATERTHANOREQUAL",
    0xA3: "OP_MIN",
    0xA4: "OP_MAX",
    0xA5: "OP_WITHIN",
    0xA6: "OP_RIPEMD160",
    0xA7: "OP_SHA1",
    0xA8: "OP_SHA256",
    0xA9: "OP_HASH160",
    0xAA: "OP_HASH256",
    0xAB: "OP_CODESEPARATOR",
    0xAC: "OP_CHECKSIG",
    0xAD: "OP_CHECKSIGVERIFY",
    0xAE: "OP_CHECKMULTISIG",
    0xAF: "OP_CHECKMULTISIGVERIFY",
    0xB0: "OP_NOP1",
    0xB1: "OP_CLTV",
    0xB2: "OP_CSV",
    0xBA: "OP_CHECKSIGADD",
    0xFF: "OP_INVALIDOPCODE",
}


def opcode_name(opcode: int) -> str:
    """Return the display name of a single opcode byte."""
    if opcode == OP_0:
        return "OP_0"
    if opcode < OP_PUSHDATA1:
        return f"OP_PUSHBYTES_{opcode}"
    if OP_1 <= opcode <= 0x60:
        return f"OP_PUSHNUM_{opcode - 0x50}"
    if 0xB3 <= opcode <= 0xB9:
        return f"OP_NOP{opcode - 0xAF}"
    if opcode in _NAMED_OPCODES:
        return _NAMED_OPCODES[opcode]
    # 0xbb..0xfe are undefined and fail the script like OP_RETURN
    return f"OP_RETURN_{opcode}"


def disassemble(script: bytes) -> str:
    """
    Render a script in human-readable assembly.

    Pushes are shown as the push opcode followed by the pushed bytes in hex,
    e.g. "OP_DUP OP_HASH160 OP_PUSHBYTES_20 <hash> OP_EQUALVERIFY OP_CHECKSIG".
    A push whose declared length runs past the end of the script is shown as
    "<push past end>", a truncated PUSHDATA length as "<unexpected end>".
    """
    parts: list[str] = []
    i = 0
    while i < len(script):
        opcode = script[i]
        i += 1
        parts.append(opcode_name(opcode))

        if OP_0 < opcode < OP_PUSHDATA1:
            data_len = opcode
        elif opcode in (OP_PUSHDATA1, OP_PUSHDATA2, OP_PUSHDATA4):
            width = {OP_PUSHDATA1: 1, OP_PUSHDATA2: 2, OP_PUSHDATA4: 4}[opcode]
            if i + width > len(script):
                parts.append("<unexpected end>")
                break
            data_len = int.from_bytes(script[i : i + width], "little")
            i += width
        else:
            continue

        if data_len == 0:
            continue
        if i + data_len > len(script):
            parts.append("<push past end>")
            break
        parts.append(script[i : i + data_len].hex())
        i += data_len

    return " ".join(parts)


def is_p2pk(script: bytes) -> bool:
    """<33 or 65 byte pubkey> OP_CHECKSIG"""
    if len(script) == 35:
        return script[0] == OP_PUSHBYTES_33 and script[-1] == OP_CHECKSIG
    if len(script) == 67:
        return script[0] == OP_PUSHBYTES_65 and script[-1] == OP_CHECKSIG
    return False


def is_p2pkh(script: bytes) -> bool:
    """OP_DUP OP_HASH160 <20 bytes> OP_EQUALVERIFY OP_CHECKSIG"""
    return (
        len(script) == 25
        and script[0] == OP_DUP
        and script[1] == OP_HASH160
        and script[2] == OP_PUSHBYTES_20
        and script[23] == OP_EQUALVERIFY
        and script[24] == OP_CHECKSIG
    )


def is_p2sh(script: bytes) -> bool:
    """OP_HASH160 <20 bytes> OP_EQUAL"""
    return (
        len(script) == 23
        and script[0] == OP_HASH160
        and script[1] == OP_PUSHBYTES_20
        and script[22] == OP_EQUAL
    )


def is_p2wpkh(script: bytes) -> bool:
    """OP_0 <20 bytes>"""
    return len(script) == 22 and script[0] == OP_0 and script[1] == OP_PUSHBYTES_20


def is_p2wsh(script: bytes) -> bool:
    """OP_0 <32 bytes>"""
    return len(script) == 34 and script[0] == OP_0 and script[1] == OP_PUSHBYTES_32


def is_p2tr(script: bytes) -> bool:
    """OP_1 <32 bytes>"""
    return len(script) == 34 and script[0] == OP_1 and script[1] == OP_PUSHBYTES_32


class ScriptType(str, Enum):
    P2PK = "Pay to Public Key (P2PK)"
    P2PKH = "Pay to Public Key Hash (P2PKH)"
    P2SH = "Pay to Script Hash (P2SH)"
    P2WPKH = "Pay to Witness Public Key Hash (P2WPKH)"
    P2WSH = "Pay to Witness Script Hash (P2WSH)"
    P2TR = "Pay to Taproot (P2TR)"
    UNKNOWN = "unknown"


# Checked in order, first match wins
SCRIPT_TEMPLATES: tuple[tuple[ScriptType, Callable[[bytes], bool]], ...] = (
    (ScriptType.P2PK, is_p2pk),
    (ScriptType.P2PKH, is_p2pkh),
    (ScriptType.P2SH, is_p2sh),
    (ScriptType.P2WPKH, is_p2wpkh),
    (ScriptType.P2WSH, is_p2wsh),
    (ScriptType.P2TR, is_p2tr),
)


def classify_script(script: bytes) -> ScriptType:
    """Classify a scriptPubKey against the standard output templates."""
    for script_type, matches in SCRIPT_TEMPLATES:
        if matches(script):
            return script_type
    return ScriptType.UNKNOWN
