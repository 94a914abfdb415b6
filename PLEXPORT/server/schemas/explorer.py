from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from PLEXPORT.server.schemas.base import CamelModel


###############################################################################
class DatabaseQueryRequest(BaseModel):
    """Body of the explorer query endpoint.

    Fields are typed loosely on purpose: malformed optional entries are
    dropped by the explorer instead of failing validation, and a bad table
    name must surface as 400 rather than 422.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    table: Any = None
    limit: Any = None
    offset: Any = None
    order_by: Any = Field(default=None, alias="orderBy")
    direction: Any = None
    columns: Any = None
    search: Any = None
    filters: Any = None
    primary_key_value: Any = Field(default=None, alias="primaryKeyValue")

    # -------------------------------------------------------------------------
    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


###############################################################################
class TableSummaryModel(CamelModel):
    name: str = Field(..., min_length=1)
    row_count: int | None = None


###############################################################################
class TableListResponse(CamelModel):
    tables: list[TableSummaryModel]


###############################################################################
class ColumnInfoModel(CamelModel):
    name: str
    declared_type: str
    not_null: bool
    primary_key: bool
    default_value: Any = None


###############################################################################
class PaginationModel(CamelModel):
    limit: int = Field(..., ge=1)
    offset: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    has_more: bool


###############################################################################
class EnumValueModel(CamelModel):
    value: str
    count: int = Field(..., ge=0)


###############################################################################
class FilterOptionsModel(CamelModel):
    primary_key: str | None = None
    date_columns: list[str] = Field(default_factory=list)
    enum_values: dict[str, list[EnumValueModel]] = Field(default_factory=dict)
    nullable_columns: list[str] = Field(default_factory=list)


###############################################################################
class EqualsFilterModel(CamelModel):
    column: str
    value: str | int | float


###############################################################################
class NullFilterModel(CamelModel):
    column: str
    mode: str


###############################################################################
class DateRangeModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    column: str
    start: str | None = Field(default=None, alias="from")
    end: str | None = Field(default=None, alias="to")


###############################################################################
class AppliedFiltersModel(CamelModel):
    equals: list[EqualsFilterModel] = Field(default_factory=list)
    date_range: DateRangeModel | None = None
    nulls: list[NullFilterModel] = Field(default_factory=list)
    primary_key_value: str | None = None


###############################################################################
class DatabaseQueryResponse(CamelModel):
    table: str
    columns: list[ColumnInfoModel]
    schema_: list[ColumnInfoModel] = Field(..., alias="schema")
    rows: list[dict[str, Any]]
    pagination: PaginationModel
    search: str | None = None
    order_by: str | None = None
    direction: str
    searchable_columns: list[str]
    filter_options: FilterOptionsModel
    applied_filters: AppliedFiltersModel
    selected_columns: list[str]
