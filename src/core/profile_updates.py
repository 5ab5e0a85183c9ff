"""
PetCare Dashboard — Profile updates.

A closed set of explicit update variants, one per profile field. The profile
store dispatches on the variant type; there is no generic key/value setter.

JSON example (e.g. from an inline button or a test fixture):
{
    "kind": "weight",
    "weight": 7.2
}
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from src.data.models import Diet


class SetName(BaseModel):
    kind: Literal["name"] = "name"
    name: str


class SetWeight(BaseModel):
    """New weight in kg. Non-finite values are rejected here; the store clamps negatives."""
    kind: Literal["weight"] = "weight"
    weight: float = Field(allow_inf_nan=False)


class SetAge(BaseModel):
    """New age in years. Non-finite values are rejected here; the store clamps negatives."""
    kind: Literal["age"] = "age"
    age: float = Field(allow_inf_nan=False)


class SetDiet(BaseModel):
    kind: Literal["diet"] = "diet"
    diet: Diet


ProfileUpdate = Annotated[
    Union[SetName, SetWeight, SetAge, SetDiet],
    Field(discriminator="kind"),
]

_update_adapter: TypeAdapter = TypeAdapter(ProfileUpdate)


def parse_profile_update(data: dict) -> SetName | SetWeight | SetAge | SetDiet:
    """Build the matching update variant from a {"kind": ..., ...} mapping.

    Raises pydantic.ValidationError on an unknown kind or a bad value.
    """
    return _update_adapter.validate_python(data)
