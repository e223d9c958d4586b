"""Protected console sections."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request

from shepherd.auth.guard import PROTECTED_PREFIXES
from shepherd.auth.session import Session
from shepherd_web.auth.deps import SignedInDep
from shepherd_web.rest.middleware import PATHNAME_HEADER

router = APIRouter()

SECTIONS = frozenset(prefix.lstrip("/") for prefix in PROTECTED_PREFIXES)


def known_section(section: str) -> str:
    if section not in SECTIONS:
        raise HTTPException(status_code=404, detail="Not Found")
    return section


SectionDep = Annotated[str, Depends(known_section)]


def _section_view(section: str, request: Request, session: Session) -> dict[str, Any]:
    return {
        "section": section,
        "path": request.headers.get(PATHNAME_HEADER, request.url.path),
        "user": {
            "externalId": session.external_id,
            "email": session.primary_email,
            "firstName": session.first_name,
            "lastName": session.last_name,
        },
    }


@router.get("/{section}")
async def section_index(section: SectionDep, request: Request, session: SignedInDep) -> dict[str, Any]:
    return _section_view(section, request, session)


@router.get("/{section}/{rest:path}")
async def section_page(section: SectionDep, rest: str, request: Request, session: SignedInDep) -> dict[str, Any]:
    return _section_view(section, request, session)
