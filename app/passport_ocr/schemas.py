from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class PassportRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    first_name: str = ""
    last_name: str = ""
    gender: str = ""
    passport_number: str = ""
    national_id_number: str = ""
    date_of_birth: str = ""
    date_of_expiry: str = ""
    # Visual-zone fields; the MRZ carries no source for these.
    date_of_issue: str = ""
    issuing_authority: str = ""
    place_of_birth: str = ""


class MRZChecks(BaseModel):
    passport_number: bool = False
    date_of_birth: bool = False
    date_of_expiry: bool = False
    national_id_number: bool = False
    composite: bool = False

    @property
    def ok(self) -> bool:
        return all(
            [
                self.passport_number,
                self.date_of_birth,
                self.date_of_expiry,
                self.national_id_number,
                self.composite,
            ]
        )
