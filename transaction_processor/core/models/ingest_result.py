"""
IngestResult model summarising one successful upload.
"""

from pydantic import BaseModel, Field, model_validator


class IngestResult(BaseModel):
    """
    Outcome of an ingest that replaced the current snapshot.

    Attributes:
        total_records: Rows read from the stream
        valid_records: Rows classified as transactions
        malformed_records: Rows classified as malformed
        duration_seconds: Wall time for parse, classify and store
    """

    total_records: int = Field(..., ge=0)
    valid_records: int = Field(..., ge=0)
    malformed_records: int = Field(..., ge=0)
    duration_seconds: float = Field(0.0, ge=0.0)

    @model_validator(mode="after")
    def check_counts_add_up(self):
        """Every row is either valid or malformed."""
        if self.valid_records + self.malformed_records != self.total_records:
            raise ValueError(
                f"valid_records ({self.valid_records}) + malformed_records "
                f"({self.malformed_records}) must equal total_records ({self.total_records})"
            )
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "total_records": 120,
                "valid_records": 117,
                "malformed_records": 3,
                "duration_seconds": 0.042,
            }
        }
