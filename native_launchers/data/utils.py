import re
from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints

NonEmptyString = Annotated[str, StringConstraints(min_length=1)]
"""Type alias for non-empty strings with minimum length of 1."""

JAVA_CLASS_NAME_PATTERN = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*(\.[A-Za-z_$][A-Za-z0-9_$]*)*$")
"""Fully-qualified Java class or package name, e.g. 'com.example.Main'."""

C_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
"""Valid C identifier."""


class BaseModelWithDocstrings(BaseModel):
    """Base model with the attribute docstrings being extracted to the model JSON schema.
    Instances are immutable once validated."""

    model_config = ConfigDict(use_attribute_docstrings=True, frozen=True)
