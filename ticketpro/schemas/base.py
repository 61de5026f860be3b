from pydantic import AliasChoices, AliasGenerator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class InputModel(BaseModel):
    """Request body accepting canonical snake_case names and their camelCase spelling.

    Everything past this boundary uses the snake_case names only.
    """

    model_config = ConfigDict(
        alias_generator=AliasGenerator(validation_alias=lambda name: AliasChoices(name, to_camel(name))),
        str_strip_whitespace=True,
    )


class OutputModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)
