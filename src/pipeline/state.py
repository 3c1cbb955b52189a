from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class OutcomeAlreadyRecorded(RuntimeError):
    """A step tried to overwrite a value another step already recorded."""


def write_once(current: Any, update: Any) -> Any:
    # LangGraph reducer: the first recorded value wins, re-recording it is a no-op.
    if current is None:
        return update
    if update is None or update == current:
        return current
    raise OutcomeAlreadyRecorded(f"refusing to replace {current!r} with {update!r}")


class CreationRequest(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    price: str
    description_html: str = Field(
        "",
        validation_alias=AliasChoices("descriptionHtml", "description", "description_html"),
    )
    collection_id: str = Field(
        min_length=1,
        validation_alias=AliasChoices("collectionId", "collection_id"),
    )
    image_url: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("imageUrl", "image_url"),
    )

    @field_validator("title")
    @classmethod
    def _collapse_title(cls, v: str) -> str:
        v = " ".join(v.split())
        if not v:
            raise ValueError("title must not be empty")
        return v

    @field_validator("price", mode="before")
    @classmethod
    def _price_as_text(cls, v: Any) -> Any:
        # forms send text; JSON callers may send a number
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("image_url", mode="before")
    @classmethod
    def _blank_image_is_absent(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ErrorKind(str, Enum):
    INVALID_INPUT = "InvalidInput"
    TRANSPORT_FAILURE = "TransportFailure"
    REMOTE_VALIDATION = "RemoteValidation"
    UNEXPECTED_RESPONSE_SHAPE = "UnexpectedResponseShape"


class UserError(BaseModel):
    field: Union[List[str], str, None] = None
    message: str = ""


class Success(BaseModel):
    status: Literal["success"] = "success"
    value: Any = None


class Failure(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: Literal["failure"] = "failure"
    kind: ErrorKind
    detail: str
    user_errors: List[UserError] = Field(default_factory=list, alias="userErrors")


class NotAttempted(BaseModel):
    status: Literal["not_attempted"] = "not_attempted"
    reason: str = ""


StepOutcome = Annotated[Union[Success, Failure, NotAttempted], Field(discriminator="status")]


# ---------- typed step values ----------

class CreatedProduct(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str = ""
    description_html: str = Field("", alias="descriptionHtml")
    variant_id: str = Field(alias="variantId")
    variant_price: Optional[str] = Field(None, alias="variantPrice")


class UpdatedVariant(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    price: Optional[str] = None
    barcode: Optional[str] = None
    created_at: Optional[str] = Field(None, alias="createdAt")


class CollectionAttachment(BaseModel):
    id: str = Field(min_length=1)
    title: Optional[str] = None


class MediaAttachment(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    media_content_type: str = Field(alias="mediaContentType")
    status: Optional[str] = None


class OrchestrationState(BaseModel):
    request: CreationRequest
    entity_id: Annotated[Optional[str], write_once] = None
    variant_id: Annotated[Optional[str], write_once] = None
    product_result: Annotated[Optional[StepOutcome], write_once] = None
    variant_result: Annotated[Optional[StepOutcome], write_once] = None
    collection_result: Annotated[Optional[StepOutcome], write_once] = None
    media_result: Annotated[Optional[StepOutcome], write_once] = None
