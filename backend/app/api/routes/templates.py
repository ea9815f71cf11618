from typing import Any

from fastapi import APIRouter, HTTPException

from app.models import Envelope
from app.project_config import TemplateKind
from app.services.templates import Template, get_template, list_templates

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("/", response_model=Envelope[list[Template]])
def read_templates(category: TemplateKind | None = None) -> Any:
    return Envelope(data=list_templates(category))


@router.get("/{template_id}", response_model=Envelope[Template])
def read_template(template_id: str) -> Any:
    template = get_template(template_id)
    if template is None:
        raise HTTPException(status_code=404, detail="Template not found")
    return Envelope(data=template)
