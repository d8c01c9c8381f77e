"""SPL Governance ``InstructionData`` encoding.

Governance proposals store instructions in their own borsh layout rather than
as raw transaction instructions::

    InstructionData {
        program_id: Pubkey,
        accounts: Vec<AccountMetaData { pubkey, is_signer: bool, is_writable: bool }>,
        data: Vec<u8>,
    }

``serialize_instruction_to_base64`` and ``get_instruction_data_from_base64`` are
the two halves the proposal builders use to normalise an SDK instruction into
that form.
"""

from __future__ import annotations

import base64
import struct
from dataclasses import dataclass, field

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

_PUBKEY_LEN = 32
_U32 = struct.Struct("<I")


class InstructionDecodeError(ValueError):
    pass


@dataclass(frozen=True)
class AccountMetaData:
    pubkey: Pubkey
    is_signer: bool
    is_writable: bool


@dataclass(frozen=True)
class InstructionData:
    program_id: Pubkey
    accounts: list[AccountMetaData] = field(default_factory=list)
    data: bytes = b""

    @classmethod
    def from_instruction(cls, instruction: Instruction) -> InstructionData:
        return cls(
            program_id=instruction.program_id,
            accounts=[
                AccountMetaData(
                    pubkey=meta.pubkey,
                    is_signer=meta.is_signer,
                    is_writable=meta.is_writable,
                )
                for meta in instruction.accounts
            ],
            data=bytes(instruction.data),
        )

    def to_instruction(self) -> Instruction:
        return Instruction(
            self.program_id,
            self.data,
            [
                AccountMeta(a.pubkey, is_signer=a.is_signer, is_writable=a.is_writable)
                for a in self.accounts
            ],
        )

    def serialize(self) -> bytes:
        out = bytearray(bytes(self.program_id))
        out.extend(_U32.pack(len(self.accounts)))
        for account in self.accounts:
            out.extend(bytes(account.pubkey))
            out.append(1 if account.is_signer else 0)
            out.append(1 if account.is_writable else 0)
        out.extend(_U32.pack(len(self.data)))
        out.extend(self.data)
        return bytes(out)

    @classmethod
    def deserialize(cls, raw: bytes) -> InstructionData:
        reader = _Reader(raw)
        program_id = reader.pubkey()
        accounts = []
        for _ in range(reader.u32()):
            pubkey = reader.pubkey()
            is_signer = reader.flag()
            is_writable = reader.flag()
            accounts.append(AccountMetaData(pubkey, is_signer, is_writable))
        data = reader.take(reader.u32())
        if reader.remaining:
            raise InstructionDecodeError(
                f"{reader.remaining} trailing bytes after instruction data"
            )
        return cls(program_id=program_id, accounts=accounts, data=data)


class _Reader:
    def __init__(self, raw: bytes) -> None:
        self._raw = raw
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._raw) - self._pos

    def take(self, n: int) -> bytes:
        if n > self.remaining:
            raise InstructionDecodeError(
                f"unexpected end of instruction data at offset {self._pos}"
            )
        chunk = self._raw[self._pos : self._pos + n]
        self._pos += n
        return chunk

    def u32(self) -> int:
        return _U32.unpack(self.take(_U32.size))[0]

    def pubkey(self) -> Pubkey:
        return Pubkey.from_bytes(self.take(_PUBKEY_LEN))

    def flag(self) -> bool:
        value = self.take(1)[0]
        if value > 1:
            raise InstructionDecodeError(f"invalid bool byte {value}")
        return value == 1


def serialize_instruction_to_base64(instruction: Instruction) -> str:
    return base64.b64encode(
        InstructionData.from_instruction(instruction).serialize()
    ).decode("ascii")


def get_instruction_data_from_base64(encoded: str) -> InstructionData:
    return InstructionData.deserialize(base64.b64decode(encoded))
