from pydantic import BaseModel, ConfigDict, Field

from splitledger.models.base import PyObjectId


class Member(BaseModel):
    """
    Member identity as provided by the profile store.

    Read-only here: profiles are created and edited by the identity provider.
    """
    id: PyObjectId = Field(alias="_id")
    name: str = ""
    email: str

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        from_attributes=True
    )

    @property
    def display_name(self) -> str:
        return self.name or self.email.split("@")[0]
