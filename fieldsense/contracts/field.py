"""Field descriptor contract.

The descriptor is produced by whatever inspects the page; classification never
sees a document tree, only these extracted attributes.
"""

from pydantic import BaseModel, Field


class FieldDescriptor(BaseModel):
    """Descriptive attributes of one form field."""

    selector: str = ""
    tag_name: str = "input"
    input_type: str | None = None

    # Descriptive text used to build signals
    label: str | None = None
    name: str | None = None
    id: str | None = None
    placeholder: str | None = None
    autocomplete: str | None = None
    context_signals: str = ""

    # Constraints
    required: bool = False
    pattern: str | None = None
    max_length: int | None = Field(default=None, ge=0)

    # Raw markup, only forwarded to the assistant
    element_html: str | None = None
    context_html: str | None = None

    field_type: str = "unknown"
