from pydantic import BaseModel, ConfigDict


def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


class ApiModel(BaseModel):
    """Wire model: camelCase on the wire, snake_case in Python; both accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def dump(model_cls: type[ApiModel], obj) -> dict:
    """Serialize an ORM row (or any attribute bag) through model_cls into JSON-ready camelCase."""
    return model_cls.model_validate(obj).model_dump(by_alias=True, mode="json")
