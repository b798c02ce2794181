from pydantic import AliasGenerator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError


class RequestModel(BaseModel):
    """リクエストボディ: JSONのcamelCaseキーを受け付ける"""

    model_config = ConfigDict(
        alias_generator=AliasGenerator(validation_alias=to_camel),
        populate_by_name=True,
        extra="ignore",
    )


class ResponseModel(BaseModel):
    """レスポンス: ORMオブジェクトから生成し、camelCaseで出力する"""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=AliasGenerator(serialization_alias=to_camel),
    )


def reject_null(value):
    """部分更新: キーの省略は許すが、明示的な null は受け付けない (NOT NULL列への書き込みを防ぐ)"""
    if value is None:
        raise PydanticCustomError("null_not_allowed", "Field must not be null")
    return value
