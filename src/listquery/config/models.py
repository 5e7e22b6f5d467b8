"""Pydantic models for list view configuration."""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, model_validator

OptionValue = Union[bool, int, float, str]


class FilterKind(str, Enum):
    """Filter kinds understood by the filter stage."""

    SELECT = "select"
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    DATE_RANGE = "dateRange"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class FilterOption(BaseModel):
    """One selectable value of a select filter."""

    value: OptionValue
    label: str


class FilterDefinition(BaseModel):
    """A declaratively configured filter offered by a list view."""

    key: str = Field(..., min_length=1, description="Record field the filter applies to")
    label: str = Field(..., description="Human-readable label")
    kind: str = Field(..., description="Filter kind: select, text, number, date or dateRange")
    options: Optional[List[FilterOption]] = Field(default=None, description="Choices (select only)")
    placeholder: Optional[str] = Field(default=None, description="Optional input hint")

    @model_validator(mode="after")
    def _options_only_for_select(self) -> "FilterDefinition":
        if self.options is not None and self.kind != FilterKind.SELECT.value:
            raise ValueError(f"Filter '{self.key}': options are only allowed for kind 'select'")
        return self

    def get_option_label(self, value: Any) -> str:
        """Label for a select value, falling back to the value itself."""
        for option in self.options or []:
            if option.value == value:
                return option.label
        return str(value)


class SortSpec(BaseModel):
    """Active sort key and direction."""

    model_config = {"frozen": True}

    key: str
    direction: SortDirection = SortDirection.ASC


class ViewConfig(BaseModel):
    """Everything a list view declares about searching, filtering, sorting and paging."""

    name: str = "default"
    searchable_fields: List[str] = Field(default_factory=list)
    filters: List[FilterDefinition] = Field(default_factory=list)
    fields: Optional[List[str]] = Field(default=None, description="Declared record field names, if known")
    page_size: int = Field(default=10, ge=1)
    initial_filters: Dict[str, Any] = Field(default_factory=dict)
    initial_sort: Optional[SortSpec] = None
    debounce_seconds: float = Field(default=0.3, ge=0)

    @model_validator(mode="after")
    def _validate_keys(self) -> "ViewConfig":
        seen = set()
        for definition in self.filters:
            if definition.key in seen:
                raise ValueError(f"Duplicate filter key: {definition.key}")
            seen.add(definition.key)

        if self.fields is None:
            return self

        declared = set(self.fields)
        referenced = [
            ("searchable field", key) for key in self.searchable_fields
        ] + [
            ("filter key", definition.key) for definition in self.filters
        ] + [
            ("initial filter", key) for key in self.initial_filters
        ]
        if self.initial_sort is not None:
            referenced.append(("sort key", self.initial_sort.key))

        for role, key in referenced:
            if key not in declared:
                raise ValueError(f"Unknown {role} '{key}' (not in declared fields)")
        return self

    def get_filter(self, key: str) -> Optional[FilterDefinition]:
        for definition in self.filters:
            if definition.key == key:
                return definition
        return None
