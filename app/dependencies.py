from fastapi import Query


class Pagination:
    """
    FastAPI dependency for the page/page_size query parameters shared by
    list endpoints.

    Usage:
        @router.get("/example")
        async def example_endpoint(pagination: Pagination = Depends()):
            offset = (pagination.page - 1) * pagination.page_size
    """

    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number"),
        page_size: int = Query(20, ge=1, le=100, description="Items per page"),
    ):
        self.page = page
        self.page_size = page_size
