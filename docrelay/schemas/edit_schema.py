from enum import Enum

from pydantic import AliasChoices, BaseModel, Field


class ActionKind(str, Enum):
    ADD_TEXT = "addText"
    REPLACE_ALL = "replaceAll"
    SET_TITLE_OR_HEADING = "setTitleOrHeading"
    ADD_LIST = "addList"
    APPLY_FORMATTING = "applyFormatting"
    FIND_AND_REPLACE = "findAndReplace"
    AUTO_DETECT = "auto"


class OAuthCredentials(BaseModel):
    access_token: str | None = Field(None, validation_alias=AliasChoices("access_token", "accessToken"))
    refresh_token: str | None = Field(None, validation_alias=AliasChoices("refresh_token", "refreshToken"))
    token_type: str | None = None


class EditDocRequest(BaseModel):
    # targetUrl / instruction are checked by the pipeline so that a missing
    # value is a 400 InputError rather than a 422.
    target_url: str | None = Field(None, validation_alias=AliasChoices("targetUrl", "docUrl", "target_url"))
    instruction: str | None = None
    action_hint: str = Field("auto", validation_alias=AliasChoices("actionHint", "action", "action_hint"))
    options: dict = Field(default_factory=dict)
    credentials: OAuthCredentials | None = None
    auth_state: dict | None = Field(None, validation_alias=AliasChoices("authState", "auth_state"))
    user_id: str | None = Field(None, validation_alias=AliasChoices("userId", "user_id"))

    model_config = {"populate_by_name": True}


class OperationResult(BaseModel):
    succeeded: bool
    platform: str
    action_performed: ActionKind = Field(alias="actionPerformed")
    message: str
    verified: bool | None = None
    warnings: list[str] = Field(default_factory=list)
    auth_method: str | None = Field(None, alias="authMethod")
    url: str | None = None

    model_config = {"populate_by_name": True}


class DetectFileRequest(BaseModel):
    url: str | None = None
    content: str | None = None
    filename: str | None = None


class DetectFileResponse(BaseModel):
    recognized: bool
    platform: str | None = None
    credential_key: str | None = Field(None, alias="credentialKey")
    supported_actions: list[ActionKind] = Field(default_factory=list, alias="supportedActions")

    model_config = {"populate_by_name": True}


class SaveCredentialsRequest(BaseModel):
    user_id: str = Field(alias="userId")
    platform: str
    auth_state: dict = Field(alias="authState")

    model_config = {"populate_by_name": True}


class AuthCheckRequest(BaseModel):
    credentials: OAuthCredentials | None = None
