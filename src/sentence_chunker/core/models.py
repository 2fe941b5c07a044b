from typing import Any

from pydantic import BaseModel, field_validator


class HarnessCase(BaseModel):
    source_text: str = ""
    expected: list[str] | None = None  # a bare string is one expected sentence

    @field_validator("expected", mode="before")
    @classmethod
    def _wrap_single_sentence(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value


class HarnessSuite(BaseModel):
    tests: list[Any]  # validated per case so one bad case does not sink the file


class ChunkRecord(BaseModel):
    start_offset: int
    length: int
    text: str
