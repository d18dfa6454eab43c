from pydantic import BaseModel


class LintFinding(BaseModel):
    line: int
    character: int
    reason: str
    evidence: str | None = None
