"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, Request

from fieldsense.inference import SharedInfrastructure, SoftMatchEngine


def get_infra(request: Request) -> SharedInfrastructure:
    return request.app.state.infra


def get_engine(request: Request) -> SoftMatchEngine:
    return request.app.state.infra.engine


InfraDep = Annotated[SharedInfrastructure, Depends(get_infra)]
EngineDep = Annotated[SoftMatchEngine, Depends(get_engine)]
