"""Function-call payload encoding for governance proposals.

Builds ``selector || abi.encode(args)`` from a function name, its parameter
types and the argument values as typed into a form (all strings), plus a
keccak256 hash of the payload for proposal identification.
"""

from __future__ import annotations

import json
import re
from collections.abc import Sequence
from typing import Any

from eth_abi import encode
from eth_abi.exceptions import ABITypeError, EncodingError, ParseError
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from web3 import Web3

from .errors import CalldataEncodingError

_ARRAY_SUFFIX = re.compile(r"\[\d*\]$")
_INT_TYPE = re.compile(r"^u?int\d*$")
_BYTES_TYPE = re.compile(r"^bytes\d*$")


class CalldataResult(BaseModel):
    """Encoded call payload; serialises with camelCase keys."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    calldata: str
    calldata_hash: str
    contract_address: str
    function_name: str
    signature: str


def function_signature(function_name: str, types: Sequence[str]) -> str:
    """Canonical signature, e.g. ``transfer(address,uint256)``."""
    return f"{function_name}({','.join(t.strip() for t in types)})"


def function_selector(signature: str) -> bytes:
    """First four bytes of ``keccak256(signature)``."""
    return bytes(Web3.keccak(text=signature)[:4])


def encode_calldata(
    contract_address: str,
    function_name: str,
    types: Sequence[str],
    args: Sequence[Any],
    names: Sequence[str | None] | None = None,
) -> CalldataResult:
    """Encode a call to ``function_name(types...)`` with *args*.

    Args:
        contract_address: Target contract; validated as a 20-byte address.
        function_name: Name of the function to call.
        types: Ordered Solidity parameter types.
        args: Ordered argument values, normally strings from a form.
        names: Optional parameter names used in error messages.

    Raises:
        CalldataEncodingError: Naming the parameter that could not be
            encoded (its name, or its index when unnamed).
    """
    if not function_name:
        raise CalldataEncodingError("functionName", "Function name is required")
    if not Web3.is_address(contract_address):
        raise CalldataEncodingError("contractAddress", "Invalid Ethereum address")
    if len(args) != len(types):
        raise CalldataEncodingError(
            "arguments", f"Expected {len(types)} argument(s), got {len(args)}"
        )

    types = [t.strip() for t in types]
    values: list[Any] = []
    for index, (abi_type, raw) in enumerate(zip(types, args)):
        label = _label(names, index)
        value = coerce_argument(abi_type, raw, label)
        try:
            encode([abi_type], [value])
        except (EncodingError, ABITypeError, ParseError, ValueError, TypeError) as exc:
            raise CalldataEncodingError(label, str(exc)) from exc
        values.append(value)

    signature = function_signature(function_name, types)
    payload = function_selector(signature) + encode(types, values)
    return CalldataResult(
        calldata="0x" + payload.hex(),
        calldata_hash="0x" + bytes(Web3.keccak(payload)).hex(),
        contract_address=contract_address,
        function_name=function_name,
        signature=signature,
    )


def coerce_argument(abi_type: str, value: Any, label: str) -> Any:
    """Convert a form value into what the ABI encoder expects for *abi_type*.

    Raises:
        CalldataEncodingError: If the value cannot represent *abi_type*.
    """
    if _ARRAY_SUFFIX.search(abi_type):
        element_type = _ARRAY_SUFFIX.sub("", abi_type)
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                raise CalldataEncodingError(label, "Failed to parse array") from None
        if not isinstance(value, list):
            raise CalldataEncodingError(label, "Failed to parse array")
        return [coerce_argument(element_type, item, label) for item in value]

    if abi_type == "bool":
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text not in ("true", "false"):
            raise CalldataEncodingError(label, f"Expected 'true' or 'false', got {value!r}")
        return text == "true"

    if abi_type == "address":
        if not isinstance(value, str) or not Web3.is_address(value):
            raise CalldataEncodingError(label, "Invalid Ethereum address")
        return Web3.to_checksum_address(value)

    if _INT_TYPE.match(abi_type):
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        text = str(value).strip()
        try:
            return int(text, 16) if text.lower().startswith(("0x", "-0x")) else int(text, 10)
        except ValueError:
            raise CalldataEncodingError(label, f"Invalid integer: {value!r}") from None

    if _BYTES_TYPE.match(abi_type):
        if isinstance(value, (bytes, bytearray)):
            return bytes(value)
        text = str(value).strip()
        if not text.startswith("0x"):
            raise CalldataEncodingError(label, "Bytes must be a 0x-prefixed hex string")
        try:
            return bytes.fromhex(text[2:])
        except ValueError:
            raise CalldataEncodingError(label, f"Invalid hex string: {value!r}") from None

    if isinstance(value, str) and value.lstrip().startswith("[") and abi_type.startswith("("):
        # Tuples are entered as JSON arrays.
        try:
            return tuple(json.loads(value))
        except json.JSONDecodeError:
            raise CalldataEncodingError(label, "Failed to parse tuple") from None

    return value


def _label(names: Sequence[str | None] | None, index: int) -> str:
    if names and index < len(names) and names[index]:
        return str(names[index])
    return str(index)
