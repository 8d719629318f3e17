from enum import Enum
from typing import Optional
from pydantic import BaseModel

# -ENUMS for validation and type safety
class FilterKey(str, Enum):
    """
    The seven field names understood by the search query language.
    The five reference-backed keys are resolved through a reference table
    (`tag`, `artist`, ...) and a join table (`manga_tag`, `manga_artist`, ...).
    """
    TAG = "tag"
    CHARACTER = "character"
    ARTIST = "artist"
    MGROUP = "mgroup"
    PARODY = "parody"
    TITLE = "title"
    ID = "id"

    @classmethod
    def parse(cls, text: str) -> Optional["FilterKey"]:
        try:
            return cls(text)
        except ValueError:
            return None

    @property
    def is_reference(self) -> bool:
        return self not in (FilterKey.TITLE, FilterKey.ID)

    @property
    def reference_table(self) -> str:
        if not self.is_reference:
            raise ValueError(f"'{self.value}' is not a reference-backed filter key")
        return self.value

    @property
    def name_field(self) -> str:
        # Reference rows keep their normalized name in a column named after the table.
        return self.reference_table

    @property
    def join_table(self) -> str:
        return f"manga_{self.reference_table}"

    @property
    def foreign_key(self) -> str:
        return f"{self.reference_table}_id"


# Keys whose names are attached to every returned item.
ENRICHED_KEYS = {
    "tags": FilterKey.TAG,
    "artist": FilterKey.ARTIST,
}


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def from_param(cls, value: Optional[str]) -> "SortOrder":
        """Anything other than an explicit 'desc' means ascending."""
        return cls.DESC if value == cls.DESC.value else cls.ASC

    @property
    def ascending(self) -> bool:
        return self is SortOrder.ASC


# --- PYDANTIC MODELS for API responses

class ErrorResponse(BaseModel):
    error: str
    message: Optional[str] = None

    def body(self) -> dict:
        return self.model_dump(exclude_none=True)
