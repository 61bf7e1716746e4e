"""FastAPI dependencies shared by the route modules."""

from fastapi import Request

from people_api.repositories import PeopleRepository


def get_repository(request: Request) -> PeopleRepository:
    """
    The application's single repository instance.

    create_app() stores it on app.state; handlers receive it through
    Depends(get_repository) and never import a global.
    """
    return request.app.state.repository
