"""
Tunable numbers of the search engine.

Kept in one validated settings object so the scores used by the evaluation, the Medium tier and the minimax
search cannot drift apart.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SearchSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    search_depth: int = Field(default=3, ge=0)
    medium_best_move_probability: float = Field(default=0.8, ge=0.0, le=1.0)
    check_bonus: int = Field(default=10, ge=0)
    check_score: int = Field(default=50, ge=0)
    checkmate_score: int = Field(default=1000, gt=0)

    @model_validator(mode="after")
    def checkmate_dominates_check(self) -> "SearchSettings":
        # NOTE: a mate must always outweigh a plain check, otherwise Hard would prefer checks over mates
        if self.checkmate_score <= self.check_score:
            raise ValueError(
                f"checkmate_score ({self.checkmate_score}) must exceed check_score ({self.check_score})"
            )
        return self


DEFAULT_SETTINGS = SearchSettings()
