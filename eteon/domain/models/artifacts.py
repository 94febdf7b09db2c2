from typing import List
from pydantic import BaseModel, Field


class SourceRef(BaseModel):
    """A cited web source"""
    title: str = ""
    uri: str


class CodeSnippet(BaseModel):
    """One executed-code step of a response"""
    language: str = ""
    code: str = ""
    outcome: str = ""
    output: str = ""

    @property
    def has_result(self) -> bool:
        return bool(self.outcome or self.output)


class ArtifactBundle(BaseModel):
    """Metadata produced alongside one model reply"""
    thoughts: List[str] = Field(default_factory=list, description="Reasoning fragments")
    sources: List[SourceRef] = Field(default_factory=list, description="Sources unique by URI")
    code_snippets: List[CodeSnippet] = Field(default_factory=list, description="Executed code steps")
