from pydantic import BaseModel, Field


class BreakdownResponse(BaseModel):
    subtasks: list[str] = Field(
        description="0-5 trimmed, non-empty subtask titles"
    )


class PlanResponse(BaseModel):
    plan: str = Field(
        description="Markdown day plan, passed through from the model"
    )


class ErrorResponse(BaseModel):
    error: str
