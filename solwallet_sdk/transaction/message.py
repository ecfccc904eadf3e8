"""
Legacy transaction message layout and system-program transfer instructions.

Wire layout of a message:

    header (3 bytes)
    compact(len(account_keys)) ‖ account_keys (32 bytes each)
    recent_blockhash (32 bytes)
    compact(len(instructions)) ‖ instructions

where each instruction is

    program_id_index (1 byte) ‖ compact(len(accounts)) ‖ account indices (1 byte each)
    ‖ compact(len(data)) ‖ data
"""
import logging
import struct
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from solwallet_sdk.codec import b58, shortvec
from solwallet_sdk.config import MAX_LAMPORTS, SYSTEM_PROGRAM_ID, TRANSFER_DISCRIMINATOR
from solwallet_sdk.exceptions import AmountOutOfRange, MalformedInput

logger = logging.getLogger(__name__)

KEY_LENGTH = 32
HEADER_LENGTH = 3
MAX_ACCOUNT_INDEX = 0xFF

_TRANSFER_LAYOUT = struct.Struct("<IQ")


def _check_key(name: str, key: bytes) -> bytes:
    if not isinstance(key, (bytes, bytearray)) or len(key) != KEY_LENGTH:
        raise MalformedInput(f"{name} must be {KEY_LENGTH} bytes")
    return bytes(key)


@dataclass(frozen=True)
class AccountMeta:
    """An account referenced by an instruction, with its access flags"""
    pubkey: bytes
    is_signer: bool
    is_writable: bool

    def __post_init__(self):
        object.__setattr__(self, "pubkey", _check_key("Account key", self.pubkey))


@dataclass(frozen=True)
class Instruction:
    """
    An uncompiled instruction.

    Attributes:
        program_id: 32-byte id of the program to invoke
        accounts: Ordered accounts the program reads or writes
        data: Opaque instruction payload
    """
    program_id: bytes
    accounts: Tuple[AccountMeta, ...]
    data: bytes

    def __post_init__(self):
        object.__setattr__(self, "program_id", _check_key("Program id", self.program_id))
        object.__setattr__(self, "accounts", tuple(self.accounts))
        object.__setattr__(self, "data", bytes(self.data))


@dataclass(frozen=True)
class MessageHeader:
    num_required_signatures: int
    num_readonly_signed_accounts: int
    num_readonly_unsigned_accounts: int

    def __post_init__(self):
        for value in (self.num_required_signatures,
                      self.num_readonly_signed_accounts,
                      self.num_readonly_unsigned_accounts):
            if not 0 <= value <= 0xFF:
                raise MalformedInput(f"Header field {value} does not fit in one byte")

    def serialize(self) -> bytes:
        return bytes([
            self.num_required_signatures,
            self.num_readonly_signed_accounts,
            self.num_readonly_unsigned_accounts,
        ])


@dataclass(frozen=True)
class CompiledInstruction:
    """An instruction whose program and accounts are indices into the message keys"""
    program_id_index: int
    accounts: Tuple[int, ...]
    data: bytes

    def __post_init__(self):
        object.__setattr__(self, "accounts", tuple(self.accounts))
        object.__setattr__(self, "data", bytes(self.data))


@dataclass(frozen=True)
class Message:
    """
    A compiled transaction message.

    Every index referenced by an instruction is checked against
    ``account_keys`` on construction.
    """
    header: MessageHeader
    account_keys: Tuple[bytes, ...]
    recent_blockhash: bytes
    instructions: Tuple[CompiledInstruction, ...] = field(default_factory=tuple)

    def __post_init__(self):
        keys = tuple(_check_key("Account key", key) for key in self.account_keys)
        object.__setattr__(self, "account_keys", keys)
        object.__setattr__(self, "recent_blockhash", _check_key("Recent blockhash", self.recent_blockhash))
        object.__setattr__(self, "instructions", tuple(self.instructions))

        if len(set(keys)) != len(keys):
            raise MalformedInput("Message account keys contain duplicates")
        if len(keys) > MAX_ACCOUNT_INDEX + 1:
            raise MalformedInput(f"Message references {len(keys)} accounts, at most {MAX_ACCOUNT_INDEX + 1} allowed")

        header = self.header
        if header.num_required_signatures < 1:
            raise MalformedInput("Message requires at least one signature (the fee payer)")
        if header.num_required_signatures > len(keys):
            raise MalformedInput("More required signatures than account keys")
        if header.num_readonly_signed_accounts >= header.num_required_signatures:
            raise MalformedInput("Fee payer must be writable")
        if header.num_readonly_unsigned_accounts > len(keys) - header.num_required_signatures:
            raise MalformedInput("More readonly unsigned accounts than unsigned accounts")

        for instruction in self.instructions:
            indices = (instruction.program_id_index,) + instruction.accounts
            for index in indices:
                if not 0 <= index < len(keys):
                    raise MalformedInput(f"Instruction references account index {index} out of range")

    @property
    def fee_payer(self) -> bytes:
        return self.account_keys[0]

    def is_signer(self, index: int) -> bool:
        return index < self.header.num_required_signatures

    def is_writable(self, index: int) -> bool:
        header = self.header
        if index < header.num_required_signatures:
            return index < header.num_required_signatures - header.num_readonly_signed_accounts
        return index < len(self.account_keys) - header.num_readonly_unsigned_accounts

    def signer_keys(self) -> Tuple[bytes, ...]:
        return self.account_keys[:self.header.num_required_signatures]

    def serialize(self) -> bytes:
        """Serialize to the canonical wire layout"""
        out = bytearray(self.header.serialize())
        out += shortvec.encode_length(len(self.account_keys))
        for key in self.account_keys:
            out += key
        out += self.recent_blockhash
        out += shortvec.encode_length(len(self.instructions))
        for instruction in self.instructions:
            out.append(instruction.program_id_index)
            out += shortvec.encode_length(len(instruction.accounts))
            out += bytes(instruction.accounts)
            out += shortvec.encode_length(len(instruction.data))
            out += instruction.data
        return bytes(out)

    @classmethod
    def deserialize(cls, data: bytes) -> "Message":
        """
        Parse a serialized message.

        Raises:
            MalformedInput: If the data is truncated, has trailing bytes or
                references invalid indices
        """
        reader = _Reader(data)
        message = reader.read_message()
        if not reader.at_end():
            raise MalformedInput(f"{reader.remaining()} trailing bytes after message")
        return message


class _Reader:
    """Cursor over serialized transaction bytes"""

    def __init__(self, data: bytes, offset: int = 0):
        self.data = bytes(data)
        self.offset = offset

    def remaining(self) -> int:
        return len(self.data) - self.offset

    def at_end(self) -> bool:
        return self.offset == len(self.data)

    def read(self, size: int) -> bytes:
        if size > self.remaining():
            raise MalformedInput(f"Truncated input: wanted {size} bytes at offset {self.offset}")
        chunk = self.data[self.offset:self.offset + size]
        self.offset += size
        return chunk

    def read_u8(self) -> int:
        return self.read(1)[0]

    def read_length(self) -> int:
        value, consumed = shortvec.decode_length(self.data, self.offset)
        self.offset += consumed
        return value

    def read_message(self) -> Message:
        header = MessageHeader(*self.read(HEADER_LENGTH))
        keys = tuple(self.read(KEY_LENGTH) for _ in range(self.read_length()))
        blockhash = self.read(KEY_LENGTH)
        instructions = []
        for _ in range(self.read_length()):
            program_id_index = self.read_u8()
            accounts = tuple(self.read(self.read_length()))
            payload = self.read(self.read_length())
            instructions.append(CompiledInstruction(program_id_index, accounts, payload))
        return Message(header, keys, blockhash, tuple(instructions))


def _check_lamports(lamports: int) -> int:
    if isinstance(lamports, bool) or not isinstance(lamports, int):
        raise TypeError(f"Lamports must be int, got {type(lamports).__name__}")
    if not 0 <= lamports <= MAX_LAMPORTS:
        raise AmountOutOfRange(f"Lamport amount {lamports} does not fit in 64 bits")
    return lamports


def transfer_instruction(from_pubkey: bytes, to_pubkey: bytes, lamports: int) -> Instruction:
    """
    Build a system-program Transfer instruction.

    Args:
        from_pubkey: 32-byte sender key (signer, writable)
        to_pubkey: 32-byte recipient key (writable)
        lamports: Amount to move

    Returns:
        Instruction whose data is u32le(2) ‖ u64le(lamports)

    Raises:
        AmountOutOfRange: If lamports is negative or above 2**64 - 1
    """
    data = _TRANSFER_LAYOUT.pack(TRANSFER_DISCRIMINATOR, _check_lamports(lamports))
    return Instruction(
        program_id=SYSTEM_PROGRAM_ID,
        accounts=(
            AccountMeta(from_pubkey, is_signer=True, is_writable=True),
            AccountMeta(to_pubkey, is_signer=False, is_writable=True),
        ),
        data=data,
    )


def parse_transfer_data(data: bytes) -> int:
    """
    Extract the lamport amount from Transfer instruction data.

    Raises:
        MalformedInput: If the payload is not a Transfer instruction
    """
    if len(data) != _TRANSFER_LAYOUT.size:
        raise MalformedInput(f"Transfer data must be {_TRANSFER_LAYOUT.size} bytes, got {len(data)}")
    discriminator, lamports = _TRANSFER_LAYOUT.unpack(bytes(data))
    if discriminator != TRANSFER_DISCRIMINATOR:
        raise MalformedInput(f"Not a transfer instruction (discriminator {discriminator})")
    return lamports


def _category(meta: AccountMeta) -> int:
    # Wire order: writable signers, readonly signers, writable, readonly
    return (0 if meta.is_signer else 2) + (0 if meta.is_writable else 1)


def compile_message(
    instructions: Sequence[Instruction],
    fee_payer: bytes,
    recent_blockhash: bytes,
) -> Message:
    """
    Compile instructions into a message.

    The fee payer comes first as a writable signer. Each instruction then
    contributes its accounts followed by its program id; a key already in
    the list is not added again (raw byte comparison) and only widens the
    existing entry's flags.

    Args:
        instructions: Instructions in execution order
        fee_payer: 32-byte fee payer key
        recent_blockhash: 32-byte recent block hash

    Returns:
        Compiled message

    Raises:
        MalformedInput: If the first-seen order is not the canonical
            signer/writable order the header can describe
    """
    metas: Dict[bytes, AccountMeta] = {}

    def add(meta: AccountMeta):
        existing = metas.get(meta.pubkey)
        if existing is None:
            metas[meta.pubkey] = meta
        else:
            metas[meta.pubkey] = AccountMeta(
                meta.pubkey,
                is_signer=existing.is_signer or meta.is_signer,
                is_writable=existing.is_writable or meta.is_writable,
            )

    add(AccountMeta(fee_payer, is_signer=True, is_writable=True))
    for instruction in instructions:
        for meta in instruction.accounts:
            add(meta)
        add(AccountMeta(instruction.program_id, is_signer=False, is_writable=False))

    ordered: List[AccountMeta] = list(metas.values())
    categories = [_category(meta) for meta in ordered]
    if categories != sorted(categories):
        raise MalformedInput("Instruction accounts are not in signer/writable order")

    header = MessageHeader(
        num_required_signatures=sum(1 for m in ordered if m.is_signer),
        num_readonly_signed_accounts=sum(1 for m in ordered if m.is_signer and not m.is_writable),
        num_readonly_unsigned_accounts=sum(1 for m in ordered if not m.is_signer and not m.is_writable),
    )
    index_of = {meta.pubkey: i for i, meta in enumerate(ordered)}
    compiled = tuple(
        CompiledInstruction(
            program_id_index=index_of[instruction.program_id],
            accounts=tuple(index_of[meta.pubkey] for meta in instruction.accounts),
            data=instruction.data,
        )
        for instruction in instructions
    )
    return Message(header, tuple(index_of), _check_key("Recent blockhash", recent_blockhash), compiled)


def build_transfer_message(
    from_address: str,
    to_address: str,
    lamports: int,
    recent_blockhash: str,
) -> Message:
    """
    Build the message for a single SOL transfer.

    Args:
        from_address: Base58 sender address (also the fee payer)
        to_address: Base58 recipient address
        lamports: Amount in lamports
        recent_blockhash: Base58 recent block hash

    Returns:
        Compiled message; a transfer to self is still a valid message

    Raises:
        MalformedInput: If an address or the block hash does not decode to 32 bytes
        AmountOutOfRange: If lamports does not fit in 64 bits
    """
    from_pubkey = b58.decode_address(from_address)
    to_pubkey = b58.decode_address(to_address)
    blockhash = b58.decode_address(recent_blockhash)

    instruction = transfer_instruction(from_pubkey, to_pubkey, lamports)
    message = compile_message([instruction], from_pubkey, blockhash)
    logger.debug(
        "Built transfer of %d lamports %s… -> %s… (%d accounts)",
        lamports, from_address[:6], to_address[:6], len(message.account_keys),
    )
    return message
