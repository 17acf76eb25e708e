from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional, Any, Dict


class SliceStatus(str, Enum):
    """Known slice statuses. Anything else is displayed as 'Other'."""
    CREATED = "Created"
    PLANNED = "Planned"
    ASSIGNED = "Assigned"
    REVIEW = "Review"
    BLOCKED = "Blocked"
    DONE = "Done"


OTHER_STATUS = "Other"
KNOWN_STATUSES = {s.value for s in SliceStatus}


class Slice(BaseModel):
    """
    One backlog work item. Only `title` and `status` matter for forecasting;
    every other field of the uploaded JSON is kept as an extra so the backlog
    can be handed back unchanged.
    """
    model_config = ConfigDict(extra="allow")

    title: str
    status: str = Field(SliceStatus.CREATED.value, description="Created, Planned, Assigned, Review, Blocked, Done or free text.")

    @field_validator('title')
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError('Each slice must have a "title".')
        return v

    @field_validator('status', mode='before')
    @classmethod
    def default_status(cls, v):
        # A slice without status is shown as Created
        if v is None or v == "":
            return SliceStatus.CREATED.value
        return str(v)

    @property
    def display_status(self) -> str:
        return self.status if self.status in KNOWN_STATUSES else OTHER_STATUS

    @property
    def is_done(self) -> bool:
        return self.status == SliceStatus.DONE.value


class Group(BaseModel):
    """
    Named subset of slice titles sharing one risk weight.
    `slices` holds titles; titles that do not match a backlog slice are ignored.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: Optional[str] = None
    slices: List[str] = Field(default_factory=list)
    risk: Optional[float] = None
    exclude: bool = False
    targetRelease: Optional[str] = Field(None, alias="target_release")

    @field_validator('slices', mode='before')
    @classmethod
    def flatten_slice_refs(cls, v: Any) -> Any:
        """The backlog tool stores whole slice objects in groups; keep their titles."""
        if v is None:
            return []
        if isinstance(v, list):
            titles = []
            for item in v:
                if isinstance(item, dict):
                    titles.append(item.get('title'))
                elif isinstance(item, Slice):
                    titles.append(item.title)
                else:
                    titles.append(item)
            return titles
        return v

    @field_validator('exclude', mode='before')
    @classmethod
    def exclude_none_is_false(cls, v):
        return bool(v) if v is not None else False


class Backlog(BaseModel):
    """Parsed backlog document as uploaded by the planning tool."""
    slices: List[Slice]
    groups: List[Group] = Field(default_factory=list)
    forecasts: List[Dict[str, Any]] = Field(default_factory=list)

    @field_validator('groups', 'forecasts', mode='before')
    @classmethod
    def none_to_empty(cls, v):
        return [] if v is None else v
