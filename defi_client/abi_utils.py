from typing import Any, List, Sequence, Tuple

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError as AbiEncodingError
from web3 import Web3

from defi_client.errors import EncodingError, InvalidArgument

SELECTOR_SIZE = 4


def parse_signature(signature: str) -> Tuple[str, List[str]]:
    """Split ``name(type1,type2)`` into the name and its argument types.

    Tuple arguments are not supported; none of the handler entry points use them.
    """
    name, sep, rest = signature.partition('(')
    if not name or not sep or not rest.endswith(')'):
        raise EncodingError(f"malformed function signature: {signature!r}")
    inner = rest[:-1].strip()
    if '(' in inner:
        raise EncodingError(f"tuple arguments are not supported: {signature!r}")
    types = [t.strip() for t in inner.split(',')] if inner else []
    return name, types


def function_selector(signature: str) -> bytes:
    return bytes(Web3.keccak(text=signature)[:SELECTOR_SIZE])


def encode_call(signature: str, args: Sequence[Any]) -> bytes:
    """Encode a contract call as ``selector + abi-encoded arguments``."""
    _, types = parse_signature(signature)
    if len(types) != len(args):
        raise EncodingError(
            f"{signature} expects {len(types)} arguments, got {len(args)}"
        )
    try:
        encoded = encode(types, list(args))
    except (AbiEncodingError, TypeError, ValueError, OverflowError) as e:
        raise EncodingError(f"failed to encode {signature}: {e}") from e
    return function_selector(signature) + encoded


def decode_result(types: Sequence[str], data: bytes) -> Tuple[Any, ...]:
    """Decode the return data of a read-only call."""
    try:
        return decode(list(types), bytes(data))
    except (DecodingError, TypeError, ValueError) as e:
        raise EncodingError(f"failed to decode {types} from {len(data)} bytes: {e}") from e


def strip_selector(data: bytes) -> bytes:
    """Drop the leading 4-byte function selector from encoded call data."""
    if len(data) < SELECTOR_SIZE:
        raise EncodingError(f"call data too short to carry a selector: {len(data)} bytes")
    return bytes(data[SELECTOR_SIZE:])


def to_checksum(address: str) -> str:
    # 대소문자 체크섬은 검증하지 않고 정규화만 한다
    if not isinstance(address, str) or not Web3.is_address(address.lower()):
        raise InvalidArgument(f"invalid address: {address!r}")
    return Web3.to_checksum_address(address.lower())
