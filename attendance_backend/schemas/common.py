"""
Shared pydantic building blocks for request bodies.

Bodies arrive in camelCase ("firstName"); the models expose snake_case
attributes so model_dump(exclude_unset=True) maps straight onto ORM columns.
"""
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, StringConstraints
from pydantic.alias_generators import to_camel

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Password = Annotated[str, StringConstraints(min_length=6, max_length=128)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def changes(self) -> dict:
        """Only the fields the client actually sent, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


def lower_email(value: Optional[str]) -> Optional[str]:
    return value.strip().lower() if value is not None else None


Email = Annotated[EmailStr, AfterValidator(lower_email)]
