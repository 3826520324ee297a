"""Request bodies accepted by the HTTP API."""

from __future__ import annotations

from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Request(BaseModel):
	model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CreatePostRequest(_Request):
	title: Optional[str] = None
	content: Optional[str] = None
	category: Optional[str] = None
	module_id: Optional[int] = Field(default=None, validation_alias=AliasChoices("module_id", "moduleId"))


class CommentRequest(_Request):
	content: Optional[str] = None


class SaveToggleRequest(_Request):
	discussion_id: int = Field(validation_alias=AliasChoices("discussion_id", "discussionId"))


class StartConversationRequest(_Request):
	recipient_id: Optional[int] = Field(default=None, validation_alias=AliasChoices("recipientId", "recipient_id"))


class SendMessageRequest(_Request):
	content: Optional[str] = None


class SubscribeRequest(_Request):
	module_id: int = Field(validation_alias=AliasChoices("module_id", "moduleId"))


class UploadMaterialRequest(_Request):
	title: Optional[str] = None
	module: Optional[str] = None
	year: Optional[Union[int, str]] = None
	type: Optional[str] = None
	description: Optional[str] = None
	file_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("file_url", "fileUrl"))
	link: Optional[str] = None


class ProfileUpdateRequest(BaseModel):
	first_name: Optional[str] = None
	last_name: Optional[str] = None
	year_of_study: Optional[str] = None
	department_id: Optional[int] = None
	bio: Optional[str] = None

	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")
