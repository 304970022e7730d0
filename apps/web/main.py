"""FastAPI web application for DepHint."""

from typing import Literal, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from core.annotate import annotate_manifest
from core.decoration import build_decoration
from core.detect import identify
from core.document import TextBuffer
from core.errors import ManifestError
from core.models import (
    Classification,
    DependencyItem,
    Ecosystem,
    PresentationPreferences,
    ReplaceInstruction,
    SourceRange,
)
from core.parse import parse_manifest
from core.replace import ReplaceSession, replace_all, replace_version

app = FastAPI(
    title="DepHint",
    description="Version-compatibility hints for dependency manifests",
    version="0.1.0",
)


class DependencyModel(BaseModel):
    """A declared dependency as the editor sees it."""
    key: str
    value: Optional[str] = None
    range: SourceRange
    line: int = Field(ge=0)
    end_of_line: int = Field(ge=0)
    deco_range: Optional[SourceRange] = None

    def to_item(self) -> DependencyItem:
        deco_range = self.deco_range or SourceRange.on_line(self.line, self.end_of_line, self.end_of_line)
        return DependencyItem(
            key=self.key,
            value=self.value,
            range=self.range,
            line=self.line,
            end_of_line=self.end_of_line,
            deco_range=deco_range,
        )


class DecorateRequest(BaseModel):
    """Request model for decorating one dependency."""
    item: DependencyModel
    versions: list[str]
    preferences: PresentationPreferences = Field(default_factory=PresentationPreferences)
    ecosystem: Ecosystem = Ecosystem.UNKNOWN
    vulnerabilities: Optional[dict[str, list[str]]] = None
    error: Optional[str] = None


class DecorateResponse(BaseModel):
    """Response model for a single decoration."""
    classification: Classification
    range: SourceRange
    position: Literal["before", "after"]
    render_text: str
    hover: str
    is_trusted: bool
    latest: Optional[str] = None
    current: Optional[str] = None


class CheckRequest(BaseModel):
    """Request model for checking a whole manifest."""
    content: str
    filename: Optional[str] = None
    ecosystem: Optional[Ecosystem] = None
    versions: dict[str, list[str]]
    vulnerabilities: Optional[dict[str, dict[str, list[str]]]] = None
    preferences: PresentationPreferences = Field(default_factory=PresentationPreferences)


class CheckResponse(BaseModel):
    """Response model for a manifest check."""
    ecosystem: Ecosystem
    outdated: int
    errors: int
    dependencies: list[dict]
    update_all: list[ReplaceInstruction]


class ReplaceRequest(BaseModel):
    """Request model for a clicked replace-version link."""
    content: str
    payload: str


class ReplaceAllRequest(BaseModel):
    """Request model for applying queued replacements."""
    content: str
    instructions: list[ReplaceInstruction]


class ReplaceResponse(BaseModel):
    """Response model for replace operations."""
    updated_content: str
    applied: int


@app.post("/api/decorate", response_model=DecorateResponse)
async def decorate(request: DecorateRequest):
    """Build the inline hint and hover document for one dependency."""
    if not request.versions and not request.error:
        raise HTTPException(status_code=400, detail="No versions provided")

    decoration, classification = build_decoration(
        request.item.to_item(),
        request.versions,
        request.preferences,
        request.ecosystem,
        vulnerabilities=request.vulnerabilities,
        error=request.error,
    )
    return DecorateResponse(
        classification=classification,
        range=decoration.range,
        position=decoration.position,
        render_text=decoration.render_text,
        hover=decoration.hover.value,
        is_trusted=decoration.hover.is_trusted,
        latest=decoration.latest,
        current=decoration.current,
    )


@app.post("/api/check", response_model=CheckResponse)
async def check_manifest(request: CheckRequest):
    """Check every dependency of a manifest."""
    try:
        content = request.content
        if not content.strip():
            raise HTTPException(status_code=400, detail="No content provided")

        # Detect ecosystem
        ecosystem = request.ecosystem or identify(content, request.filename)
        if ecosystem is Ecosystem.UNKNOWN:
            raise HTTPException(status_code=400, detail="Unsupported ecosystem: unknown")

        manifest = parse_manifest(content, ecosystem, request.filename)
        if not manifest.items:
            raise HTTPException(status_code=400, detail="No dependencies found to check")

        session = ReplaceSession()
        report = annotate_manifest(
            manifest,
            request.versions,
            request.preferences,
            vulnerabilities=request.vulnerabilities,
            session=session,
        )

        dependencies = [
            {
                "name": annotation.item.name,
                "constraint": annotation.item.value,
                "line": annotation.item.line,
                "classification": annotation.classification.value,
                "latest": annotation.decoration.latest,
                "current": annotation.decoration.current,
                "text": annotation.decoration.render_text,
                "hover": annotation.decoration.hover.value,
            }
            for annotation in report.annotations
        ]

        return CheckResponse(
            ecosystem=ecosystem,
            outdated=report.outdated,
            errors=report.errors,
            dependencies=dependencies,
            update_all=list(session.replace_items),
        )

    except HTTPException:
        # Re-raise HTTP exceptions (don't convert to 500)
        raise
    except ManifestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error checking dependencies: {str(e)}")


@app.post("/api/replace", response_model=ReplaceResponse)
async def replace(request: ReplaceRequest):
    """Apply a clicked replace-version payload to manifest content."""
    document = TextBuffer(request.content)
    applied = await replace_version(document, request.payload, ReplaceSession())
    return ReplaceResponse(updated_content=document.text, applied=int(applied))


@app.post("/api/replace-all", response_model=ReplaceResponse)
async def replace_all_versions(request: ReplaceAllRequest):
    """Apply queued replacements, last queued first."""
    document = TextBuffer(request.content)
    session = ReplaceSession(replace_items=list(request.instructions))
    applied = await replace_all(document, session)
    return ReplaceResponse(updated_content=document.text, applied=applied)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
