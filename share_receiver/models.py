"""
Data models for the share receiver.
"""
from enum import Enum
from typing import Dict, Any, Optional, List, Union

from pydantic import BaseModel, ConfigDict, Field


class ValidationError(BaseModel):
    """A single failed check, keyed by the claimed field that disagreed"""
    model_config = ConfigDict(frozen=True)

    key: str
    message: str


class PerRecordResult(BaseModel):
    """Off-chain integrity outcome for one data record"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    layer2_hash: Optional[str] = Field(None, alias="layer2Hash")
    errors: List[ValidationError]


class DataRecord(BaseModel):
    """One shared attestation reference; unknown fields are kept"""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    tx: str
    layer2_hash: str = Field(..., alias="layer2Hash")
    attester: str


class Submission(BaseModel):
    """Inbound share payload, after shape validation has passed"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    token: str
    subject: str
    data: List[Any]
    packed_data: str = Field(..., alias="packedData")
    signature: str


class DecodedLogEvent(BaseModel):
    """One decoded field of an emitted event"""
    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    value: str


class DecodedLog(BaseModel):
    """A decoded log entry from a transaction receipt"""
    model_config = ConfigDict(frozen=True)

    address: str
    name: str
    events: List[DecodedLogEvent]

    def value_of(self, name: str) -> Optional[str]:
        """Return the value of the named event field, or None if absent"""
        for event in self.events:
            if event.name == name:
                return event.value
        return None


class Stage(str, Enum):
    """Pipeline stages, in execution order"""
    FORMAT = "format"
    OFF_CHAIN = "off_chain"
    DATA_INTEGRITY = "data_integrity"
    ON_CHAIN = "on_chain"


class Outcome(str, Enum):
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class VerificationResult(BaseModel):
    """Terminal state of the verification pipeline"""
    model_config = ConfigDict(frozen=True)

    outcome: Outcome
    token: Optional[str] = None
    stage: Optional[Stage] = None
    errors: List[Union[ValidationError, PerRecordResult]] = Field(default_factory=list)

    @classmethod
    def accepted(cls, token: str) -> "VerificationResult":
        return cls(outcome=Outcome.ACCEPTED, token=token)

    @classmethod
    def rejected(
        cls,
        stage: Stage,
        errors: List[Union[ValidationError, PerRecordResult]]
    ) -> "VerificationResult":
        return cls(outcome=Outcome.REJECTED, stage=stage, errors=list(errors))

    @property
    def is_accepted(self) -> bool:
        return self.outcome is Outcome.ACCEPTED

    def response_body(self) -> Dict[str, Any]:
        """
        Build the JSON body returned to the caller.

        Returns:
            {"success": True, "token": ...} when accepted, otherwise
            {"errors": [...]} carrying only the failing stage's errors
        """
        if self.is_accepted:
            return {"success": True, "token": self.token}
        return {"errors": [e.model_dump(by_alias=True) for e in self.errors]}
