"""
Data models for node responses, signing requests and batch records.

Node responses are parsed with Decimal for JSON floats so BTC amounts
reach the wallet exactly as the node reported them.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_serializer,
    field_validator,
    model_validator,
)

from signtxs.constants import TX_FIELD


class TxSignerError(Exception):
    """Base class for errors that abort a signing run."""

    pass


class ResponseParseError(TxSignerError):
    """A node/wallet response did not have the expected shape."""

    pass


class DecodeError(ResponseParseError):
    pass


class ResolveError(ResponseParseError):
    pass


class SignError(ResponseParseError):
    pass


class InputFormatError(TxSignerError):
    """The batch input could not be read as a list of transaction records."""

    pass


class TxInput(BaseModel):
    """One entry of the `vin` array returned by decoderawtransaction."""

    model_config = ConfigDict(extra="ignore")

    txid: str | None = None
    vout: int | None = Field(default=None, ge=0, le=0xFFFFFFFF)
    coinbase: str | None = None
    txinwitness: list[str] | None = None

    @model_validator(mode="after")
    def require_outpoint(self) -> TxInput:
        if self.coinbase is None and (self.txid is None or self.vout is None):
            raise ValueError("non-coinbase input must reference txid and vout")
        return self

    @property
    def has_witness(self) -> bool:
        # The node only emits txinwitness when the input carries witness data
        return self.txinwitness is not None

    @property
    def is_coinbase(self) -> bool:
        return self.coinbase is not None

    @property
    def outpoint(self) -> str:
        if self.is_coinbase:
            return "coinbase"
        return f"{self.txid}:{self.vout}"

    def prevout_key(self) -> tuple[str, int]:
        """(txid, vout) of the spent output; coinbase inputs spend none."""
        if self.txid is None or self.vout is None:
            raise ValueError("coinbase input has no referenced output")
        return self.txid, self.vout


class DecodedTransaction(BaseModel):
    model_config = ConfigDict(extra="ignore")

    txid: str = ""
    vin: list[TxInput]


class ScriptPubKey(BaseModel):
    model_config = ConfigDict(extra="ignore")

    hex: str


class TxOutput(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    value: Decimal
    n: int | None = None
    script_pubkey: ScriptPubKey = Field(alias="scriptPubKey")


class RawTransactionInfo(BaseModel):
    """Verbose getrawtransaction result, reduced to what prevout lookup needs."""

    model_config = ConfigDict(extra="ignore")

    txid: str = ""
    vout: list[TxOutput]


class PrevOut(BaseModel):
    """Previous output data passed to signrawtransactionwithwallet."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    txid: str
    vout: int = Field(..., ge=0, le=0xFFFFFFFF)
    amount: Decimal
    script_pubkey: str = Field(alias="scriptPubKey")

    @field_serializer("amount")
    def serialize_amount(self, amount: Decimal) -> str:
        # Fixed-point, never exponent notation; bitcoind accepts string amounts
        return format(amount, "f")

    def to_rpc(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class SigningRequest(BaseModel):
    raw_tx: str
    prevouts: list[PrevOut] = Field(..., min_length=1)

    def prevouts_json(self) -> str:
        return json.dumps([p.to_rpc() for p in self.prevouts], separators=(",", ":"))


class SigningResult(BaseModel):
    """
    Result of signrawtransactionwithwallet.

    `errors` is kept verbatim; entries may reference inputs that were
    resolved before signing and are not reconciled against the request.
    """

    model_config = ConfigDict(extra="ignore")

    hex: str
    complete: bool
    errors: list[Any] = Field(default_factory=list)

    @field_validator("errors", mode="before")
    @classmethod
    def none_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class TxEntry(BaseModel):
    """One record of the batch input; unknown keys pass through untouched."""

    model_config = ConfigDict(extra="allow")

    bitcoin: str = Field(..., min_length=1)

    def with_hex(self, tx_hex: str) -> TxEntry:
        return self.model_copy(update={TX_FIELD: tx_hex})


_ENTRIES = TypeAdapter(list[TxEntry])

M = TypeVar("M", bound=BaseModel)


def parse_response(
    text: str, model: type[M], error: type[ResponseParseError], what: str
) -> M:
    """
    Parse a textual node response into `model`.

    Args:
        text: Raw stdout of the node command
        model: Pydantic model describing the expected shape
        error: Exception class raised on mismatch
        what: Human readable description for the error message

    Raises:
        ResponseParseError: (the given subclass) if the text is not JSON
            or does not validate against the model
    """
    try:
        data = json.loads(text, parse_float=Decimal)
        return model.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise error(f"Failed to parse {what}: {e}") from e


def load_entries(text: str) -> list[TxEntry]:
    try:
        return _ENTRIES.validate_json(text)
    except ValidationError as e:
        raise InputFormatError(f"Failed to parse input JSON: {e}") from e


def dump_entries(entries: list[TxEntry]) -> str:
    return json.dumps([e.model_dump(mode="json") for e in entries], indent=2)
